"""Immutable server request.

Frozen metadata plus a body stream. Every ``with_*`` call returns a new
Request, so a test can derive variants from one base request.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any

from crumb.http.headers import Headers
from crumb.http.stream import Stream
from crumb.http.uri import Uri


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable server request built for tests.

    Cookies and query parameters are parsed once by the factory and
    stored as frozen mappings. ``parsed_body`` holds decoded form or JSON data the way a
    body-parsing middleware would leave it.
    """

    method: str
    uri: Uri
    headers: Headers
    body: Stream
    cookies: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    server_params: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    query_params: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    parsed_body: Any = None

    # -- Computed properties --

    @property
    def path(self) -> str:
        return self.uri.path

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    def header_line(self, name: str) -> str:
        """All values of header *name* joined with ``", "``."""
        return self.headers.get_line(name)

    # -- Chainable transformations --

    def with_header(self, name: str, value: str) -> Request:
        """Return a new Request where header *name* is set to *value*."""
        return replace(self, headers=self.headers.with_header(name, value))

    def with_added_header(self, name: str, value: str) -> Request:
        """Return a new Request with *value* appended to header *name*."""
        return replace(self, headers=self.headers.with_added_header(name, value))

    def with_parsed_body(self, data: Any) -> Request:
        """Return a new Request carrying *data* as its parsed body."""
        return replace(self, parsed_body=data)

    def with_body(self, body: Stream) -> Request:
        """Return a new Request with a different body stream."""
        return replace(self, body=body)

    def with_cookie_params(self, cookies: Mapping[str, str]) -> Request:
        """Return a new Request with a different request cookie table."""
        return replace(self, cookies=MappingProxyType(dict(cookies)))

    def with_query_params(self, query: Mapping[str, str]) -> Request:
        """Return a new Request with different query parameters.

        The URI is left untouched, so the two can disagree on purpose.
        """
        return replace(self, query_params=MappingProxyType(dict(query)))
