"""Byte stream used for request and response bodies.

Thin wrapper over a binary file object. ``str(stream)`` returns the
whole content regardless of the current position, like a message body
being cast to a string.
"""

from __future__ import annotations

import io
from typing import IO, Any

from crumb.errors import StreamError


class Stream:
    """A readable/writable byte stream over a binary file object.

    Usage::

        stream = StreamFactory().create_stream(b'{"ok": true}')
        stream.read(4)        # b'{"ok'
        str(stream)           # '{"ok": true}'
    """

    __slots__ = ("_resource",)

    def __init__(self, resource: IO[bytes]) -> None:
        self._resource: IO[bytes] | None = resource

    def _require(self) -> IO[bytes]:
        if self._resource is None:
            msg = "Stream is detached"
            raise StreamError(msg)
        if self._resource.closed:
            msg = "Stream is closed"
            raise StreamError(msg)
        return self._resource

    # -- Lifecycle --

    def close(self) -> None:
        if self._resource is not None:
            self._resource.close()
            self._resource = None

    def detach(self) -> IO[bytes] | None:
        """Return the underlying resource and leave the stream unusable."""
        resource, self._resource = self._resource, None
        return resource

    @property
    def closed(self) -> bool:
        return self._resource is None or self._resource.closed

    def __enter__(self) -> Stream:
        return self

    def __exit__(self, *_: Any) -> None:
        self.close()

    # -- Position --

    def tell(self) -> int:
        return self._require().tell()

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        return self._require().seek(offset, whence)

    def rewind(self) -> None:
        self.seek(0)

    def eof(self) -> bool:
        resource = self._require()
        position = resource.tell()
        at_end = resource.read(1) == b""
        resource.seek(position)
        return at_end

    @property
    def size(self) -> int | None:
        """Total size in bytes, or ``None`` once the stream is detached."""
        if self.closed:
            return None
        resource = self._require()
        position = resource.tell()
        end = resource.seek(0, io.SEEK_END)
        resource.seek(position)
        return end

    # -- I/O --

    def read(self, size: int = -1) -> bytes:
        return self._require().read(size)

    def write(self, data: bytes | str) -> int:
        if isinstance(data, str):
            data = data.encode("utf-8")
        return self._require().write(data)

    def get_contents(self) -> bytes:
        """Read from the current position to the end."""
        return self._require().read()

    def __str__(self) -> str:
        if self.closed:
            return ""
        try:
            self.rewind()
            return self.get_contents().decode("utf-8")
        except (io.UnsupportedOperation, OSError):
            # Write-only or unseekable resource.
            return ""

    def __repr__(self) -> str:
        state = "closed" if self.closed else f"size={self.size}"
        return f"Stream({state})"
