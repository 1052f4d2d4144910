"""
Encoders and decoders between application values and message bodies.

Codecs dispatch on the declared type through explicitly registered
converters. A codec tries its own converters first and hands anything it
does not know to its ``delegate``; only the innermost codec reports an
unsupported type. Specialized codecs therefore wrap the defaults::

    encoder = JsonEncoder(StreamAndFileEncoder(DefaultEncoder()))
"""

from __future__ import annotations

import io
import os
import typing
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from . import body as bodies
from .charset import CONTENT_TYPE, charset_from_headers
from .errors import DecodeError, EncodeError
from .request import RequestBuilder
from .response import Response

OCTET_STREAM = "application/octet-stream"

# Status codes whose responses are decoded to None without reading the body.
NO_CONTENT_STATUSES = frozenset({204, 404})

EncodeFn = Callable[[Any, RequestBuilder], None]
DecodeFn = Callable[[Response, Any], Any]


def type_tag(declared: Any) -> type | None:
    """Class to dispatch on for a declared type; generic aliases use their origin."""
    origin = typing.get_origin(declared)
    if isinstance(origin, type):
        return origin
    if isinstance(declared, type):
        return declared
    return None


def type_name(declared: Any) -> str:
    if isinstance(declared, type):
        if declared.__module__ == "builtins":
            return declared.__qualname__
        return f"{declared.__module__}.{declared.__qualname__}"
    return repr(declared)


def _lookup(converters: dict[type, Any], declared: Any) -> Any:
    tag = type_tag(declared)
    if tag is None:
        return None
    for klass in tag.__mro__:
        converter = converters.get(klass)
        if converter is not None:
            return converter
    # ABCs such as io.IOBase and os.PathLike are not part of the MRO.
    for registered, converter in converters.items():
        if issubclass(tag, registered):
            return converter
    return None


class Encoder(ABC):
    """Writes an application value into a request body."""

    @abstractmethod
    def encode(self, obj: Any, body_type: Any, builder: RequestBuilder) -> None:
        """
        Set ``builder.body`` from ``obj``.

        Args:
            obj: The value to send
            body_type: Declared type of the value; None means ``type(obj)``
            builder: The request under construction

        Raises:
            EncodeError: If the value cannot be encoded
        """


class Decoder(ABC):
    """Reads a response body into an application value."""

    @abstractmethod
    def decode(self, response: Response, return_type: Any) -> Any:
        """
        Convert the response body into ``return_type``.

        Raises:
            DecodeError: If the type is not supported
            OSError: If reading the body fails
        """


class DispatchingEncoder(Encoder):
    """Encoder built from registered ``{type: converter}`` pairs plus a delegate."""

    def __init__(self, delegate: Encoder | None = None) -> None:
        self.delegate = delegate
        self._converters: dict[type, EncodeFn] = {}

    def register(self, tag: type, converter: EncodeFn) -> DispatchingEncoder:
        self._converters[tag] = converter
        return self

    def supports(self, body_type: Any) -> bool:
        return _lookup(self._converters, body_type) is not None

    def encode(self, obj: Any, body_type: Any, builder: RequestBuilder) -> None:
        declared = body_type if body_type is not None else type(obj)
        converter = _lookup(self._converters, declared)
        if converter is not None:
            converter(obj, builder)
            return
        if self.delegate is not None:
            self.delegate.encode(obj, body_type, builder)
            return
        raise EncodeError(f"{type_name(type(obj))} is not a type supported by this encoder.")


class DispatchingDecoder(Decoder):
    """
    Decoder built from registered ``{type: converter}`` pairs plus a delegate.

    Before dispatching, 204 and 404 responses decode to None without the
    body being read. So do bodies of unknown length, even when bytes are
    present.
    """

    def __init__(self, delegate: Decoder | None = None) -> None:
        self.delegate = delegate
        self._converters: dict[type, DecodeFn] = {}

    def register(self, tag: type, converter: DecodeFn) -> DispatchingDecoder:
        self._converters[tag] = converter
        return self

    def supports(self, return_type: Any) -> bool:
        return _lookup(self._converters, return_type) is not None

    def decode(self, response: Response, return_type: Any) -> Any:
        if response.status in NO_CONTENT_STATUSES:
            return None
        # TODO: unknown-length bodies (chunked responses) are never read here;
        # decide whether they should be drained instead.
        if response.body.length is None:
            return None
        converter = _lookup(self._converters, return_type)
        if converter is not None:
            return converter(response, return_type)
        if self.delegate is not None:
            return self.delegate.decode(response, return_type)
        raise DecodeError(
            response.status,
            f"{type_name(return_type)} is not a type supported by this decoder.",
            response.request,
        )


def _encode_text(obj: str, builder: RequestBuilder) -> None:
    charset = charset_from_headers(builder.headers)
    builder.body = bodies.from_text(obj, charset)
    builder.set_default_header(CONTENT_TYPE, f"text/plain; charset={charset}")


def _encode_bytes(obj: bytes | bytearray | memoryview, builder: RequestBuilder) -> None:
    builder.body = bodies.from_bytes(obj)
    builder.set_default_header(CONTENT_TYPE, OCTET_STREAM)


class DefaultEncoder(DispatchingEncoder):
    """Encodes ``str`` and raw bytes. Anything else is an ``EncodeError``."""

    def __init__(self, delegate: Encoder | None = None) -> None:
        super().__init__(delegate)
        self.register(str, _encode_text)
        for tag in (bytes, bytearray, memoryview):
            self.register(tag, _encode_bytes)


def _encode_stream(obj: io.IOBase, builder: RequestBuilder) -> None:
    if isinstance(obj, io.TextIOBase):
        raise EncodeError(f"Unable to encode text stream {obj!r}; open it in binary mode")
    builder.body = bodies.from_stream(obj)
    builder.set_default_header(CONTENT_TYPE, OCTET_STREAM)


def _encode_file(obj: os.PathLike, builder: RequestBuilder) -> None:
    try:
        builder.body = bodies.from_file(obj)
    except FileNotFoundError as e:
        raise EncodeError(f"Unable to encode missing file - {e}") from e
    builder.set_default_header(CONTENT_TYPE, OCTET_STREAM)


class StreamAndFileEncoder(DispatchingEncoder):
    """
    Sends binary streams and files without buffering them.

    Streams become single-use bodies of unknown length; paths are opened and
    sent with their size as length.
    """

    def __init__(self, delegate: Encoder | None = None) -> None:
        super().__init__(delegate)
        self.register(io.IOBase, _encode_stream)
        self.register(os.PathLike, _encode_file)


def _decode_text(response: Response, return_type: Any) -> str:
    return bodies.read_text(response.body)


def _decode_bytes(response: Response, return_type: Any) -> bytes:
    return bodies.read_body(response.body)


class DefaultDecoder(DispatchingDecoder):
    """Decodes to ``str`` (using the body charset) or ``bytes``."""

    def __init__(self, delegate: Decoder | None = None) -> None:
        super().__init__(delegate)
        self.register(str, _decode_text)
        self.register(bytes, _decode_bytes)
