"""Cookie header parsing and Set-Cookie serialization.

Consolidates the read side (``parse_header``, used by the request
factory) and the write side (``Cookies.set`` / ``render_headers``, used
by ``Response.with_cookies``) in one module.

Parsing is lenient: malformed segments are dropped, never raised.
Rendering is lenient too: an ``expires`` that cannot be resolved or a
``same_site`` outside ``lax``/``strict`` is simply left out of the line.
"""

from __future__ import annotations

import logging
import re
import time
from collections.abc import Mapping
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime
from types import MappingProxyType
from typing import TYPE_CHECKING, Any
from urllib.parse import quote_plus, unquote_plus

from crumb.errors import InvalidInput

if TYPE_CHECKING:
    from crumb.config import CrumbConfig

logger = logging.getLogger("crumb.http")

_SEPARATOR = re.compile(r";\s*")

# Fixed English names: cookie dates must not follow the process locale.
_WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

_SAME_SITE_VALUES = frozenset({"lax", "strict"})

_UNIT_SECONDS = {
    "sec": 1,
    "second": 1,
    "min": 60,
    "minute": 60,
    "hour": 3600,
    "day": 86400,
    "week": 604800,
}
_RELATIVE_TERM = r"([+-]?)\s*(\d+)\s*(second|sec|minute|min|hour|day|week)s?"
_RELATIVE_TERM_RE = re.compile(_RELATIVE_TERM, re.IGNORECASE)
_RELATIVE_RE = re.compile(rf"\s*(?:{_RELATIVE_TERM}\s*)+", re.IGNORECASE)
_TIMESTAMP_RE = re.compile(r"\s*[+-]?\d+\s*")


# =============================================================================
# Read side
# =============================================================================


def parse_header(header: str | list[str] | tuple[str, ...]) -> dict[str, str]:
    """Parse a ``Cookie`` header value into a name-value dict.

    Accepts the raw header string or a list of header lines, in which
    case only the first line is used (an empty list parses as ``""``).

    Segments without ``=`` are skipped. Names and values are
    percent-decoded (``+`` decodes to a space). When a name repeats,
    the first occurrence wins.

    Rendering encodes with ``quote_plus``, which leaves ``~`` as is,
    while some encoders write ``%7E``. Both forms decode to ``~`` here.

    Raises:
        InvalidInput: If *header* is not a string or list/tuple of strings.
    """
    if isinstance(header, (list, tuple)):
        header = header[0] if header else ""

    if not isinstance(header, str):
        msg = "Cannot parse Cookie data. Header value must be a string."
        raise InvalidInput(msg)

    cookies: dict[str, str] = {}
    for segment in _SEPARATOR.split(header.rstrip("\r\n")):
        parts = segment.split("=", 1)
        if len(parts) != 2:
            continue
        name = unquote_plus(parts[0])
        if name not in cookies:
            cookies[name] = unquote_plus(parts[1])
    return cookies


# =============================================================================
# Dates
# =============================================================================


def format_cookie_date(timestamp: int) -> str:
    """Format a Unix timestamp as a classic cookie date in GMT.

    ``1623233894`` -> ``"Wed, 09-Jun-2021 10:18:14 GMT"``
    """
    moment = datetime.fromtimestamp(timestamp, UTC)
    return (
        f"{_WEEKDAYS[moment.weekday()]}, {moment.day:02d}-{_MONTHS[moment.month - 1]}-"
        f"{moment.year:04d} {moment:%H:%M:%S} GMT"
    )


def parse_expires(text: str, *, now: float | None = None) -> int | None:
    """Resolve an ``expires`` string to a Unix timestamp.

    Recognized forms, tried in order (case-insensitive):

    - ``now``
    - relative offsets: ``+1 day``, ``-30 minutes``, ``+1 week 2 hours``
      (units: sec, min, hour, day, week, singular or plural)
    - a bare integer timestamp: ``"1623233894"``
    - RFC 1123 / RFC 2822 and classic cookie dates:
      ``Wed, 09 Jun 2021 10:18:14 GMT``, ``Wed, 09-Jun-2021 10:18:14 GMT``
    - ISO 8601: ``2021-06-09T10:18:14Z``, ``2021-06-09``

    Dates without a timezone are taken as UTC. Returns ``None`` when
    nothing matches.
    """
    current = time.time() if now is None else now
    stripped = text.strip()
    if not stripped:
        return None

    if stripped.lower() == "now":
        return int(current)

    if _RELATIVE_RE.fullmatch(stripped):
        offset = 0
        for sign, amount, unit in _RELATIVE_TERM_RE.findall(stripped):
            seconds = int(amount) * _UNIT_SECONDS[unit.lower()]
            offset += -seconds if sign == "-" else seconds
        return int(current) + offset

    if _TIMESTAMP_RE.fullmatch(stripped):
        return int(stripped)

    moment: datetime | None = None
    try:
        moment = parsedate_to_datetime(stripped)
    except (TypeError, ValueError, IndexError):
        try:
            moment = datetime.fromisoformat(stripped)
        except ValueError:
            return None

    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return int(moment.timestamp())


def _expires_timestamp(expires: int | float | str) -> int:
    if isinstance(expires, str):
        timestamp = parse_expires(expires)
        if timestamp is None:
            logger.debug("Ignoring unparseable cookie expires value %r", expires)
            return 0
        return timestamp
    try:
        return int(expires)
    except (TypeError, ValueError, OverflowError):
        logger.debug("Ignoring non-numeric cookie expires value %r", expires)
        return 0


# =============================================================================
# Write side
# =============================================================================


@dataclass(frozen=True, slots=True)
class CookieAttributes:
    """The value and attributes of one response cookie.

    ``None`` means the attribute is absent and is not rendered.
    """

    value: str = ""
    domain: str | None = None
    host_only: bool | None = None
    path: str | None = None
    expires: int | float | str | None = None
    secure: bool = False
    http_only: bool = False
    same_site: str | None = None

    def to_header_value(self, name: str) -> str:
        """Serialize to a ``Set-Cookie`` header value string.

        Attribute order is fixed:
        ``name=value; domain; path; expires; secure; HostOnly; HttpOnly; SameSite``.
        """
        result = f"{quote_plus(str(name))}={quote_plus(str(self.value))}"

        if self.domain is not None:
            result += f"; domain={self.domain}"

        if self.path is not None:
            result += f"; path={self.path}"

        if self.expires is not None:
            timestamp = _expires_timestamp(self.expires)
            if timestamp:
                try:
                    result += f"; expires={format_cookie_date(timestamp)}"
                except (OverflowError, OSError, ValueError):
                    logger.debug("Ignoring out-of-range cookie expires %r", self.expires)

        if self.secure:
            result += "; secure"

        if self.host_only:
            result += "; HostOnly"

        if self.http_only:
            result += "; HttpOnly"

        if isinstance(self.same_site, str) and self.same_site.lower() in _SAME_SITE_VALUES:
            # Compared lower-case, emitted as given.
            result += f"; SameSite={self.same_site}"

        return result


class Cookies:
    """Request cookie lookup plus response cookie declarations.

    One instance per request/response cycle. Request cookies are fixed
    at construction; response cookies are declared with ``set()`` and
    rendered in declaration order by ``render_headers()``::

        cookies = Cookies(parse_header("session=abc; theme=dark"))
        cookies.get("theme")                        # "dark"

        cookies.set_defaults(path="/", http_only=True)
        cookies.set("session", "xyz", secure=True)
        cookies.render_headers()
        # ["session=xyz; path=/; secure; HttpOnly"]
    """

    __slots__ = ("_defaults", "_request_cookies", "_response_cookies")

    parse_header = staticmethod(parse_header)

    def __init__(self, cookies: Mapping[str, str] | None = None) -> None:
        self._request_cookies: dict[str, str] = dict(cookies or {})
        self._response_cookies: dict[str, CookieAttributes] = {}
        self._defaults = CookieAttributes()

    @classmethod
    def from_header(cls, header: str | list[str] | tuple[str, ...]) -> Cookies:
        """Create from a raw ``Cookie`` header value."""
        return cls(parse_header(header))

    @classmethod
    def from_config(cls, config: CrumbConfig, cookies: Mapping[str, str] | None = None) -> Cookies:
        """Create with the defaults template taken from *config*."""
        return cls(cookies).set_defaults(**config.cookie_defaults)

    # -- Inspection --

    @property
    def defaults(self) -> CookieAttributes:
        return self._defaults

    @property
    def request_cookies(self) -> Mapping[str, str]:
        return MappingProxyType(self._request_cookies)

    @property
    def response_cookies(self) -> Mapping[str, CookieAttributes]:
        return MappingProxyType(self._response_cookies)

    # -- Request side --

    def get(self, name: str, default: Any = None) -> Any:
        """Return the request cookie *name*, or *default* if missing."""
        return self._request_cookies.get(name, default)

    # -- Response side --

    def set_defaults(self, **attributes: Any) -> Cookies:
        """Merge *attributes* over the defaults template.

        Only affects cookies declared afterwards. Returns self for chaining.
        """
        self._defaults = replace(self._defaults, **attributes)
        return self

    def set(self, name: str, value: str = "", **attributes: Any) -> Cookies:
        """Declare a response cookie, replacing any earlier one named *name*.

        The stored record is the defaults template with *value* and the
        given *attributes* laid over it. Returns self for chaining.
        """
        self._response_cookies[name] = replace(self._defaults, value=value, **attributes)
        return self

    def render_headers(self) -> list[str]:
        """Render one ``Set-Cookie`` header value per declared cookie."""
        return [attrs.to_header_value(name) for name, attrs in self._response_cookies.items()]
