"""Server request factory.

Everything a request needs comes in as arguments. Nothing is read from
the process environment.
"""

from collections.abc import Mapping
from types import MappingProxyType
from urllib.parse import parse_qsl

from crumb.config import CrumbConfig
from crumb.factory.stream import StreamFactory
from crumb.http.cookies import parse_header
from crumb.http.headers import Headers
from crumb.http.request import Request
from crumb.http.uri import Uri


class ServerRequestFactory:
    """Creates ``Request`` objects for tests.

    Usage::

        factory = ServerRequestFactory()
        request = factory.create_server_request(
            "GET", "/profile", {"HTTP_COOKIE": "session=abc"}
        )
        request.cookies["session"]   # "abc"
    """

    __slots__ = ("config", "stream_factory")

    def __init__(
        self,
        config: CrumbConfig | None = None,
        *,
        stream_factory: StreamFactory | None = None,
    ) -> None:
        self.config = config or CrumbConfig()
        self.stream_factory = stream_factory or StreamFactory()

    def create_server_request(
        self,
        method: str,
        uri: str | Uri,
        server_params: Mapping[str, str] | None = None,
    ) -> Request:
        """Create a request with an empty body.

        With *server_params*, headers are derived from them (over the
        configured defaults) and cookies are parsed from the ``Cookie``
        header. Without, headers and cookies start empty. Query parameters
        always come from the URI; a repeated key keeps its last value.
        """
        if isinstance(uri, str):
            uri = Uri.parse(uri)

        body = self.stream_factory.create_stream()
        headers = Headers()
        cookies: dict[str, str] = {}
        params: dict[str, str] = {}

        if server_params:
            params = {**self.config.server_params, **server_params}
            headers = Headers.from_server_params(params)
            cookies = parse_header(headers.get_list("cookie"))

        return Request(
            method=method.upper(),
            uri=uri,
            headers=headers,
            body=body,
            cookies=MappingProxyType(cookies),
            server_params=MappingProxyType(params),
            query_params=MappingProxyType(dict(parse_qsl(uri.query, keep_blank_values=True))),
        )
