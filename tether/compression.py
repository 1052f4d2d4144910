"""
Content-Encoding support for response bodies.

Supports gzip, deflate, and brotli (br) encodings.
"""

from __future__ import annotations

import gzip
import io
import logging
import zlib
from typing import Any

import brotli

from . import body as bodies
from .charset import charset_from_headers
from .codec import NO_CONTENT_STATUSES, Decoder
from .request import RequestBuilder
from .response import Response

logger = logging.getLogger(__name__)

CONTENT_ENCODING = "Content-Encoding"

ACCEPT_ENCODING = "Accept-Encoding"

# Default Accept-Encoding value matching modern browsers
DEFAULT_ACCEPT_ENCODING = "gzip, deflate, br"


def accept_compressed(builder: RequestBuilder) -> RequestBuilder:
    """Advertise every supported Content-Encoding unless the request already chose."""
    builder.set_default_header(ACCEPT_ENCODING, DEFAULT_ACCEPT_ENCODING)
    return builder


def decode_body(body: bytes, content_encoding: str) -> bytes:
    """
    Decode a body based on the Content-Encoding header.

    Args:
        body: Raw body bytes
        content_encoding: Value of the Content-Encoding header

    Returns:
        Decoded body bytes
    """
    if not content_encoding or not body:
        return body

    encoding = content_encoding.lower().strip()

    # Multiple encodings (e.g. "gzip, br") are undone in reverse order
    encodings = [e.strip() for e in encoding.split(",")]

    result = body
    for enc in reversed(encodings):
        result = _decode_single(result, enc)

    return result


def _decode_single(body: bytes, encoding: str) -> bytes:
    """Decode body with a single encoding. Undecodable input is returned as-is."""
    if encoding == "gzip":
        try:
            with gzip.GzipFile(fileobj=io.BytesIO(body)) as f:
                return f.read()
        except (OSError, EOFError, zlib.error):
            logger.debug("gzip decoding failed, keeping raw body", exc_info=True)
            return body

    if encoding == "deflate":
        try:
            # Raw deflate first (no header)
            return zlib.decompress(body, -zlib.MAX_WBITS)
        except zlib.error:
            try:
                return zlib.decompress(body)
            except zlib.error:
                logger.debug("deflate decoding failed, keeping raw body", exc_info=True)
                return body

    if encoding == "br":
        try:
            return brotli.decompress(body)
        except brotli.error:
            logger.debug("brotli decoding failed, keeping raw body", exc_info=True)
            return body

    # identity or unknown encoding
    return body


def content_encoding(response: Response) -> str:
    values = response.headers.get(CONTENT_ENCODING, ())
    return ", ".join(values)


def decompress_response(response: Response) -> Response:
    """
    Return a copy of ``response`` with its body decoded.

    The body is read fully (I/O errors propagate) and the original response
    body is closed. Content-Encoding and Content-Length are dropped from the
    copy and the charset is recomputed from the remaining headers.
    """
    encoding = content_encoding(response)
    if not encoding:
        return response
    try:
        raw = bodies.read_body(response.body)
    finally:
        response.close()
    headers = {
        name: values
        for name, values in response.headers.items()
        if name.lower() not in ("content-encoding", "content-length")
    }
    decoded = decode_body(raw, encoding)
    return (
        response.to_builder()
        .headers(headers)
        .body(bodies.from_bytes(decoded, charset_from_headers(headers)))
        .build()
    )


class DecompressingDecoder(Decoder):
    """
    Undoes Content-Encoding before handing the response to ``delegate``.

    Responses without Content-Encoding, with a no-content status, or with a
    body of unknown length are passed through untouched.
    """

    def __init__(self, delegate: Decoder) -> None:
        self.delegate = delegate

    def decode(self, response: Response, return_type: Any) -> Any:
        if (
            response.status in NO_CONTENT_STATUSES
            or response.body.length is None
            or not content_encoding(response)
        ):
            return self.delegate.decode(response, return_type)
        return self.delegate.decode(decompress_response(response), return_type)
