"""Body stream factory.

Streams are backed by a spooled temporary file: in memory while small,
rolled over to disk once they grow past ``max_memory`` bytes.
"""

import tempfile
from typing import IO

from crumb.errors import InvalidInput, StreamError
from crumb.http.stream import Stream

DEFAULT_MAX_MEMORY = 2 * 1024 * 1024  # 2 MB


class StreamFactory:
    """Creates ``Stream`` instances from content, files, or open resources."""

    __slots__ = ("max_memory",)

    def __init__(self, *, max_memory: int = DEFAULT_MAX_MEMORY) -> None:
        self.max_memory = max_memory

    def create_stream(self, content: str | bytes = "") -> Stream:
        """Create a temporary stream holding *content*, rewound to the start."""
        resource = tempfile.SpooledTemporaryFile(max_size=self.max_memory, mode="w+b")  # noqa: SIM115
        if isinstance(content, str):
            content = content.encode("utf-8")
        resource.write(content)
        resource.seek(0)
        return self.create_stream_from_resource(resource)

    def create_stream_from_file(self, filename: str, mode: str = "r") -> Stream:
        """Open *filename* as a stream. Binary mode is always used.

        Raises:
            StreamError: If the file cannot be opened with *mode*.
        """
        binary_mode = mode if "b" in mode else f"{mode}b"
        try:
            resource = open(filename, binary_mode)  # noqa: SIM115, PTH123
        except (OSError, ValueError) as exc:
            msg = f"Unable to open {filename} using mode {mode}: {exc}"
            raise StreamError(msg) from exc
        return Stream(resource)

    def create_stream_from_resource(self, resource: IO[bytes]) -> Stream:
        """Wrap an already-open binary file object.

        Raises:
            InvalidInput: If *resource* is not an open file-like object.
        """
        if not callable(getattr(resource, "read", None)) or getattr(resource, "closed", False):
            msg = "create_stream_from_resource() requires an open file-like resource"
            raise InvalidInput(msg)
        return Stream(resource)
