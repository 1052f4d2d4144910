from tether.body import (
    Body,
    BytesBody,
    EmptyBody,
    StreamBody,
    body_as_bytes,
    body_as_string,
    read_body,
    read_text,
)
from tether.charset import charset_from_headers
from tether.client import Client, invoke
from tether.codec import (
    Decoder,
    DefaultDecoder,
    DefaultEncoder,
    DispatchingDecoder,
    DispatchingEncoder,
    Encoder,
    StreamAndFileEncoder,
)
from tether.compression import DecompressingDecoder, decompress_response
from tether.errors import BodyConsumedError, DecodeError, EncodeError, TetherError
from tether.headers import Headers, HeaderView
from tether.jsoncodec import JsonDecoder, JsonEncoder
from tether.options import CallContext, Options, TimeUnit
from tether.request import HttpMethod, ProtocolVersion, Request, RequestBuilder
from tether.response import Response, ResponseBuilder

__all__ = [
    "Body",
    "BytesBody",
    "EmptyBody",
    "StreamBody",
    "body_as_bytes",
    "body_as_string",
    "read_body",
    "read_text",
    "charset_from_headers",
    "Client",
    "invoke",
    "Decoder",
    "DefaultDecoder",
    "DefaultEncoder",
    "DispatchingDecoder",
    "DispatchingEncoder",
    "Encoder",
    "StreamAndFileEncoder",
    "DecompressingDecoder",
    "decompress_response",
    "TetherError",
    "EncodeError",
    "DecodeError",
    "BodyConsumedError",
    "Headers",
    "HeaderView",
    "JsonDecoder",
    "JsonEncoder",
    "CallContext",
    "Options",
    "TimeUnit",
    "HttpMethod",
    "ProtocolVersion",
    "Request",
    "RequestBuilder",
    "Response",
    "ResponseBuilder",
]
