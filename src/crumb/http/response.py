"""HTTP response with chainable .with_*() transformation API.

Each transformation returns a new Response. Immutable by convention,
built incrementally by design.
"""

from __future__ import annotations

import json as json_module
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from crumb.http.cookies import Cookies


@dataclass(frozen=True, slots=True)
class Response:
    """An HTTP response built through immutable transformations.

    Construct with a body, then chain ``.with_*()`` calls to set
    status, headers, and cookies. Each call returns a new ``Response``.
    """

    body: str | bytes = ""
    status: int = 200
    content_type: str = "text/html; charset=utf-8"
    headers: tuple[tuple[str, str], ...] = ()

    @classmethod
    def json(cls, data: Any, *, status: int = 200) -> Response:
        """Build a JSON response from *data*."""
        return cls(body=json_module.dumps(data), status=status, content_type="application/json")

    # -- Chainable transformations --

    def with_status(self, status: int) -> Response:
        """Return a new Response with a different status code."""
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> Response:
        """Return a new Response with an additional header."""
        return replace(self, headers=(*self.headers, (name, value)))

    def with_headers(self, headers: Mapping[str, str]) -> Response:
        """Return a new Response with additional headers."""
        new = tuple(headers.items())
        return replace(self, headers=(*self.headers, *new))

    def with_content_type(self, content_type: str) -> Response:
        """Return a new Response with a different content type."""
        return replace(self, content_type=content_type)

    def with_cookies(self, cookies: Cookies) -> Response:
        """Return a new Response with one Set-Cookie per declared cookie."""
        new = tuple(("Set-Cookie", line) for line in cookies.render_headers())
        return replace(self, headers=(*self.headers, *new))

    # -- Header access --

    def get_list(self, name: str) -> list[str]:
        """Return all values for header *name* (case-insensitive).

        ``Content-Type`` falls back to the ``content_type`` field.
        """
        name_lower = name.lower()
        values = [value for key, value in self.headers if key.lower() == name_lower]
        if not values and name_lower == "content-type" and self.content_type:
            return [self.content_type]
        return values

    def header_line(self, name: str) -> str:
        """All values of header *name* joined with ``", "``."""
        return ", ".join(self.get_list(name))

    # -- Body helpers --

    @property
    def body_bytes(self) -> bytes:
        """Body as bytes."""
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return self.body

    @property
    def text(self) -> str:
        """Body as string."""
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8")
        return self.body
