from __future__ import annotations

import logging
from typing import BinaryIO

from .body import Body, EmptyBody, from_bytes, from_stream, describe
from .charset import UTF_8, charset_from_headers
from .headers import HeaderSource, Headers, HeaderView
from .request import ProtocolVersion, Request

logger = logging.getLogger(__name__)

DEFAULT_PROTOCOL_VERSION = ProtocolVersion.HTTP_1_1


class Response:
    """
    HTTP response produced by a transport.

    Headers are case-insensitive and keep every value in arrival order.
    Closing the response closes its body.
    """

    def __init__(
        self,
        status: int,
        request: Request,
        reason: str | None = None,
        headers: HeaderSource | None = None,
        body: Body | None = None,
        protocol_version: ProtocolVersion | None = DEFAULT_PROTOCOL_VERSION,
    ) -> None:
        if request is None:
            raise ValueError("original request is required")
        if status is None:
            raise ValueError("status is required")
        self._status = int(status)
        self._request = request
        self._reason = reason
        self._headers = Headers(headers)
        self._body = body if body is not None else EmptyBody()
        self._protocol_version = protocol_version or DEFAULT_PROTOCOL_VERSION

    @staticmethod
    def builder() -> ResponseBuilder:
        return ResponseBuilder()

    def to_builder(self) -> ResponseBuilder:
        return ResponseBuilder(self)

    @property
    def status(self) -> int:
        return self._status

    @property
    def reason(self) -> str | None:
        """Reason phrase; HTTP/2 transports usually have none."""
        return self._reason

    @property
    def headers(self) -> HeaderView:
        return HeaderView(self._headers)

    @property
    def body(self) -> Body:
        return self._body

    @property
    def request(self) -> Request:
        return self._request

    @property
    def protocol_version(self) -> ProtocolVersion:
        return self._protocol_version

    @property
    def charset(self) -> str:
        return self._body.charset or UTF_8

    def close(self) -> None:
        """Close the body. Failures are logged and suppressed."""
        try:
            self._body.close()
        except Exception:
            logger.debug("Ignoring failure while closing response body", exc_info=True)

    def __enter__(self) -> Response:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __str__(self) -> str:
        status_line = f"{self._protocol_version} {self._status}"
        if self._reason is not None:
            status_line += f" {self._reason}"
        lines = [status_line]
        lines.extend(f"{name}: {value}" for name, value in self._headers.pairs())
        out = "\n".join(lines) + "\n"
        rendered = describe(self._body)
        if rendered is not None:
            out += "\n" + rendered
        return out

    def __repr__(self) -> str:
        return f"<Response [{self._status}] length={self._body.length}>"


class ResponseBuilder:
    """
    Collects response fields as a transport parses them.

    Only one body source is kept: setting one clears the others. On
    ``build()`` the charset is computed once from the headers and the body is
    resolved as explicit body, then raw bytes, then stream, then empty.
    """

    def __init__(self, source: Response | None = None) -> None:
        self._status: int | None = None
        self._reason: str | None = None
        self._headers: Headers = Headers()
        self._request: Request | None = None
        self._protocol_version = DEFAULT_PROTOCOL_VERSION
        self._clear_body()
        if source is not None:
            self._status = source.status
            self._reason = source.reason
            self._headers = Headers(source.headers)
            self._body = source.body
            self._request = source.request
            self._protocol_version = source.protocol_version

    def _clear_body(self) -> None:
        self._body: Body | None = None
        self._body_bytes: bytes | None = None
        self._body_stream: BinaryIO | None = None
        self._body_length: int | None = None

    def status(self, status: int) -> ResponseBuilder:
        self._status = status
        return self

    def reason(self, reason: str | None) -> ResponseBuilder:
        self._reason = reason
        return self

    def headers(self, headers: HeaderSource | None) -> ResponseBuilder:
        self._headers = Headers(headers)
        return self

    def body(self, body: Body) -> ResponseBuilder:
        self._clear_body()
        self._body = body
        return self

    def body_bytes(self, data: bytes | bytearray | memoryview) -> ResponseBuilder:
        self._clear_body()
        self._body_bytes = bytes(data)
        return self

    def body_stream(self, stream: BinaryIO, length: int | None = None) -> ResponseBuilder:
        self._clear_body()
        self._body_stream = stream
        self._body_length = length
        return self

    def request(self, request: Request) -> ResponseBuilder:
        if request is None:
            raise ValueError("request is required")
        self._request = request
        return self

    def protocol_version(self, version: ProtocolVersion | None) -> ResponseBuilder:
        self._protocol_version = version or DEFAULT_PROTOCOL_VERSION
        return self

    def build(self) -> Response:
        if self._request is None:
            raise ValueError("original request is required")
        if self._status is None:
            raise ValueError("status is required")
        charset = charset_from_headers(self._headers)
        if self._body is not None:
            body: Body = self._body
        elif self._body_bytes is not None:
            body = from_bytes(self._body_bytes, charset)
        elif self._body_stream is not None:
            body = from_stream(self._body_stream, self._body_length, charset)
        else:
            body = EmptyBody()
        return Response(
            self._status,
            self._request,
            reason=self._reason,
            headers=self._headers,
            body=body,
            protocol_version=self._protocol_version,
        )
