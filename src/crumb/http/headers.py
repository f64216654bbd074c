"""Immutable, case-insensitive HTTP headers.

Implements ``Mapping[str, str]`` over ordered ``(name, value)`` pairs.
Changes go through ``with_*`` methods that return a new instance.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping

# CGI variables that carry headers without the HTTP_ prefix.
_CGI_HEADERS = {
    "CONTENT_TYPE": "content-type",
    "CONTENT_LENGTH": "content-length",
}


class Headers(Mapping[str, str]):
    """Immutable, case-insensitive HTTP headers.

    ``__getitem__`` returns the first matching value.
    ``get_list`` returns all values for a header (e.g. multiple ``Set-Cookie``).
    """

    __slots__ = ("_items",)

    def __init__(self, items: Iterable[tuple[str, str]] = ()) -> None:
        object.__setattr__(self, "_items", tuple(items))

    @classmethod
    def from_server_params(cls, params: Mapping[str, str]) -> Headers:
        """Build headers from CGI-style server params.

        ``HTTP_ACCEPT_LANGUAGE`` becomes ``accept-language``;
        ``CONTENT_TYPE`` and ``CONTENT_LENGTH`` are included as well.
        Every other key is ignored.
        """
        items: list[tuple[str, str]] = []
        for key, value in params.items():
            upper = key.upper()
            if upper.startswith("HTTP_"):
                items.append((upper[5:].replace("_", "-").lower(), str(value)))
            elif upper in _CGI_HEADERS:
                items.append((_CGI_HEADERS[upper], str(value)))
        return cls(items)

    def __getitem__(self, key: str) -> str:
        key_lower = key.lower()
        for name, value in self._items:
            if name.lower() == key_lower:
                return value
        raise KeyError(key)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        key_lower = key.lower()
        return any(name.lower() == key_lower for name, _ in self._items)

    def __iter__(self) -> Iterator[str]:
        seen: set[str] = set()
        for name, _ in self._items:
            key = name.lower()
            if key not in seen:
                seen.add(key)
                yield key

    def __len__(self) -> int:
        return len(set(self))

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {self.get_line(k)!r}" for k in self)
        return f"Headers({{{items}}})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """Return the first value for *key*, or *default* if missing."""
        try:
            return self[key]
        except KeyError:
            return default

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key* (e.g. multiple ``Set-Cookie``)."""
        key_lower = key.lower()
        return [value for name, value in self._items if name.lower() == key_lower]

    def get_line(self, key: str) -> str:
        """Return all values for *key* joined with ``", "`` (``""`` if missing)."""
        return ", ".join(self.get_list(key))

    def with_header(self, name: str, value: str) -> Headers:
        """Return new headers where *name* has exactly one value."""
        name_lower = name.lower()
        kept = [(n, v) for n, v in self._items if n.lower() != name_lower]
        return Headers((*kept, (name, value)))

    def with_added_header(self, name: str, value: str) -> Headers:
        """Return new headers with *value* appended to *name*."""
        return Headers((*self._items, (name, value)))

    @property
    def items_raw(self) -> tuple[tuple[str, str], ...]:
        """The ordered ``(name, value)`` pairs, original casing kept."""
        return self._items
