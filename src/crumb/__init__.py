"""crumb — test support for HTTP applications.

A cookie header codec, request and stream factories, and database
fixture helpers::

    from crumb import Cookies, parse_header

    cookies = Cookies(parse_header("session=abc; theme=dark"))
    cookies.set("theme", "light", path="/", same_site="Lax")
    cookies.render_headers()  # ["theme=light; path=/; SameSite=Lax"]
"""

from crumb.config import CrumbConfig
from crumb.errors import ConfigurationError, CrumbError, InvalidInput, RowNotFound, StreamError
from crumb.factory import ServerRequestFactory, StreamFactory
from crumb.http import CookieAttributes, Cookies, Request, Response, Stream, Uri, parse_header

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "CookieAttributes",
    "Cookies",
    "CrumbConfig",
    "CrumbError",
    "InvalidInput",
    "Request",
    "Response",
    "RowNotFound",
    "ServerRequestFactory",
    "Stream",
    "StreamError",
    "StreamFactory",
    "Uri",
    "parse_header",
]
