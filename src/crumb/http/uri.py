"""Request URI value object."""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlsplit, urlunsplit


@dataclass(frozen=True, slots=True)
class Uri:
    """A parsed request URI.

    ``Uri.parse("https://example.com:8443/users?page=2")`` splits the
    string; ``str(uri)`` puts it back together.
    """

    scheme: str = ""
    host: str = ""
    port: int | None = None
    path: str = "/"
    query: str = ""
    fragment: str = ""

    @classmethod
    def parse(cls, uri: str) -> Uri:
        parts = urlsplit(uri)
        return cls(
            scheme=parts.scheme,
            host=parts.hostname or "",
            port=parts.port,
            path=parts.path or "/",
            query=parts.query,
            fragment=parts.fragment,
        )

    @property
    def authority(self) -> str:
        if not self.host:
            return ""
        if self.port is None:
            return self.host
        return f"{self.host}:{self.port}"

    def __str__(self) -> str:
        return urlunsplit((self.scheme, self.authority, self.path, self.query, self.fragment))
