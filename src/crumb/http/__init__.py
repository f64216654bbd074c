"""HTTP value objects and the cookie header codec."""

from crumb.http.cookies import CookieAttributes, Cookies, format_cookie_date, parse_expires, parse_header
from crumb.http.headers import Headers
from crumb.http.request import Request
from crumb.http.response import Response
from crumb.http.stream import Stream
from crumb.http.uri import Uri

__all__ = [
    "CookieAttributes",
    "Cookies",
    "Headers",
    "Request",
    "Response",
    "Stream",
    "Uri",
    "format_cookie_date",
    "parse_expires",
    "parse_header",
]
