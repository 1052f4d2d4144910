from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from typing import Any

from .body import Body, EmptyBody, describe
from .headers import HeaderSource, Headers, HeaderView


class HttpMethod(Enum):
    GET = ("GET", False)
    HEAD = ("HEAD", False)
    POST = ("POST", True)
    PUT = ("PUT", True)
    DELETE = ("DELETE", False)
    CONNECT = ("CONNECT", False)
    OPTIONS = ("OPTIONS", False)
    TRACE = ("TRACE", False)
    PATCH = ("PATCH", True)

    def __init__(self, verb: str, with_body: bool) -> None:
        self.verb = verb
        self.with_body = with_body

    @classmethod
    def parse(cls, method: str | HttpMethod) -> HttpMethod:
        if isinstance(method, HttpMethod):
            return method
        if not isinstance(method, str):
            raise TypeError(f"method must be a string or HttpMethod, got {type(method).__name__}")
        try:
            return cls[method.strip().upper()]
        except KeyError:
            raise ValueError(f"Unsupported HTTP method: {method!r}") from None

    def __str__(self) -> str:
        return self.verb


class ProtocolVersion(Enum):
    HTTP_1_0 = "HTTP/1.0"
    HTTP_1_1 = "HTTP/1.1"
    HTTP_2 = "HTTP/2.0"
    MOCK = "MOCK"

    def __str__(self) -> str:
        return self.value


class Request:
    """
    Outbound HTTP request.

    Everything is read-only except the headers, which encoders and
    interceptors may still replace through ``set_header`` before the request
    is handed to a transport.

    The ``str()`` form includes every header verbatim; do not log it for
    requests carrying credentials.
    """

    def __init__(
        self,
        method: str | HttpMethod,
        url: str,
        headers: HeaderSource | None = None,
        body: Body | None = None,
        template: Any = None,
        protocol_version: ProtocolVersion = ProtocolVersion.HTTP_1_1,
    ) -> None:
        if method is None:
            raise ValueError("method is required")
        if url is None:
            raise ValueError(f"url of {method} is required")
        self._method = HttpMethod.parse(method)
        self._url = url
        self._headers = headers.copy() if isinstance(headers, Headers) else Headers(headers)
        self._body = body if body is not None else EmptyBody()
        self._template = template
        self._protocol_version = protocol_version

    @classmethod
    def create(
        cls,
        method: str | HttpMethod,
        url: str,
        headers: HeaderSource | None = None,
        body: Body | None = None,
        template: Any = None,
    ) -> Request:
        return cls(method, url, headers, body, template)

    @property
    def method(self) -> HttpMethod:
        return self._method

    @property
    def url(self) -> str:
        return self._url

    @property
    def headers(self) -> HeaderView:
        return HeaderView(self._headers)

    @property
    def body(self) -> Body:
        return self._body

    @property
    def template(self) -> Any:
        """The template this request was produced from, if any."""
        return self._template

    @property
    def protocol_version(self) -> ProtocolVersion:
        return self._protocol_version

    @property
    def charset(self) -> str | None:
        return self._body.charset

    @property
    def is_binary(self) -> bool:
        return self._body.charset is None

    @property
    def length(self) -> int | None:
        return self._body.length

    def set_header(self, name: str, values: str | Iterable[str]) -> None:
        """Replace every value of ``name``."""
        self._headers[name] = values

    def __str__(self) -> str:
        lines = [f"{self._method} {self._url} {self._protocol_version}"]
        lines.extend(f"{name}: {value}" for name, value in self._headers.pairs())
        out = "\n".join(lines) + "\n"
        rendered = describe(self._body)
        if rendered is not None:
            out += "\n" + rendered
        return out

    def __repr__(self) -> str:
        return f"<Request [{self._method} {self._url}]>"


class RequestBuilder:
    """
    Mutable request under construction.

    Encoders write the body and default headers here; ``build()`` produces
    the immutable ``Request``.
    """

    def __init__(
        self,
        method: str | HttpMethod = HttpMethod.GET,
        url: str = "",
        headers: HeaderSource | None = None,
        body: Body | None = None,
        template: Any = None,
        protocol_version: ProtocolVersion = ProtocolVersion.HTTP_1_1,
    ) -> None:
        self.method = HttpMethod.parse(method)
        self.url = url
        self.headers = Headers(headers)
        self.body: Body | None = body
        self.template = template
        self.protocol_version = protocol_version

    def header(self, name: str, *values: str) -> RequestBuilder:
        """Replace the values of ``name``; no values removes the header."""
        if values:
            self.headers[name] = list(values)
        else:
            self.headers.pop(name, None)
        return self

    def set_default_header(self, name: str, value: str) -> bool:
        """Set ``name`` only if absent. Returns True when the header was set."""
        if name in self.headers:
            return False
        self.headers[name] = value
        return True

    def build(self) -> Request:
        return Request(
            self.method,
            self.url,
            self.headers,
            self.body,
            template=self.template,
            protocol_version=self.protocol_version,
        )

    def __repr__(self) -> str:
        return f"<RequestBuilder [{self.method} {self.url}]>"
