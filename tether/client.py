from __future__ import annotations

import logging
from typing import Any, Protocol

from .codec import Decoder, DefaultDecoder, DefaultEncoder, Encoder
from .options import CallContext, Options
from .request import Request, RequestBuilder
from .response import Response

logger = logging.getLogger(__name__)

_NO_BODY = object()


class Client(Protocol):
    """
    Transport that performs the network exchange.

    Implementations may raise their own transport errors; they are passed
    through to the caller unchanged.
    """

    def execute(self, request: Request, options: Options) -> Response: ...


def invoke(
    client: Client,
    builder: RequestBuilder,
    options: Options | None = None,
    *,
    value: Any = _NO_BODY,
    body_type: Any = None,
    encoder: Encoder | None = None,
    decoder: Decoder | None = None,
    return_type: Any = str,
    method_name: str | None = None,
    context: CallContext | None = None,
) -> Any:
    """
    Run one call: encode, execute, decode.

    Args:
        client: Transport executing the request
        builder: Request under construction (method, url, headers)
        options: Base options (default: ``Options()``)
        value: Payload to encode into the body; omitted means no body
        body_type: Declared type of ``value`` (default: its runtime type)
        encoder: Encoder for ``value`` (default: ``DefaultEncoder()``)
        decoder: Decoder for the response (default: ``DefaultDecoder()``)
        return_type: Type to decode into; ``Response`` returns the open
            response and the caller must close it
        method_name: Operation name used to look up per-operation options
        context: Call context holding per-operation overrides

    Returns:
        The decoded value, or the raw Response
    """
    options = options or Options()
    if value is not _NO_BODY:
        (encoder or DefaultEncoder()).encode(value, body_type, builder)
    request = builder.build()
    effective = options.method_options(method_name, context) if method_name else options

    logger.debug("%s %s", request.method, request.url)
    response = client.execute(request, effective)
    logger.debug("%s %s -> %s", request.method, request.url, response.status)

    if return_type is Response:
        return response
    try:
        return (decoder or DefaultDecoder()).decode(response, return_type)
    finally:
        response.close()
