"""
Message bodies.

A body is one of three variants:

- ``EmptyBody``: no content, known length 0.
- ``BytesBody``: an in-memory buffer, repeatable.
- ``StreamBody``: a byte stream handed over to the first consumer, single-use.

Whoever calls ``as_stream()`` owns the returned stream. Whoever finishes
consuming a body closes it; ``close()`` never raises.
"""

from __future__ import annotations

import io
import logging
import os
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator
from typing import BinaryIO, TextIO

from .charset import UTF_8, resolve_charset
from .errors import BodyConsumedError

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 8192


def _normalize_charset(charset: str | None) -> str | None:
    return resolve_charset(charset) if charset else None


class Body(ABC):
    """Payload of a request or response."""

    @property
    @abstractmethod
    def length(self) -> int | None:
        """Length in bytes, or None when unknown."""

    @property
    @abstractmethod
    def repeatable(self) -> bool:
        """True if ``as_stream()`` may be called more than once with identical bytes."""

    @property
    @abstractmethod
    def charset(self) -> str | None:
        """Codec name of textual content, None for binary content."""

    @abstractmethod
    def as_stream(self) -> BinaryIO:
        """Return the content as a binary stream. The caller must close it."""

    def iter_bytes(self, chunk_size: int | None = None) -> Iterator[bytes]:
        """
        Iterate over the body in chunks.

        Args:
            chunk_size: Size of chunks to yield (default: 8192)

        Yields:
            Raw bytes chunks
        """
        size = chunk_size or DEFAULT_CHUNK_SIZE
        with self.as_stream() as stream:
            while True:
                chunk = stream.read(size)
                if not chunk:
                    break
                yield chunk

    def close(self) -> None:
        """Release the underlying resources. Never raises."""

    def __enter__(self) -> Body:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class EmptyBody(Body):
    @property
    def length(self) -> int:
        return 0

    @property
    def repeatable(self) -> bool:
        return True

    @property
    def charset(self) -> None:
        return None

    def as_stream(self) -> BinaryIO:
        return io.BytesIO(b"")

    def __repr__(self) -> str:
        return "<EmptyBody>"


class BytesBody(Body):
    """In-memory body. Every ``as_stream()`` call returns a fresh view."""

    def __init__(self, data: bytes | bytearray | memoryview, charset: str | None = None) -> None:
        self._data = bytes(data)
        self._charset = _normalize_charset(charset)

    @property
    def data(self) -> bytes:
        return self._data

    @property
    def length(self) -> int:
        return len(self._data)

    @property
    def repeatable(self) -> bool:
        return True

    @property
    def charset(self) -> str | None:
        return self._charset

    def as_stream(self) -> BinaryIO:
        return io.BytesIO(self._data)

    def __repr__(self) -> str:
        return f"<BytesBody {len(self._data)} bytes charset={self._charset}>"


class StreamBody(Body):
    """
    Body backed by a binary stream.

    The stream can only be handed out once: replaying it would require
    buffering, which is left to the caller (see ``read_body``).
    """

    def __init__(
        self,
        stream: BinaryIO,
        length: int | None = None,
        charset: str | None = None,
    ) -> None:
        if length is not None and length < 0:
            raise ValueError(f"length must be non-negative, got {length}")
        self._stream = stream
        self._length = length
        self._charset = _normalize_charset(charset)
        self._consumed = False

    @property
    def length(self) -> int | None:
        return self._length

    @property
    def repeatable(self) -> bool:
        return False

    @property
    def charset(self) -> str | None:
        return self._charset

    @property
    def consumed(self) -> bool:
        return self._consumed

    def as_stream(self) -> BinaryIO:
        if self._consumed:
            raise BodyConsumedError("Stream-backed body has already been consumed")
        self._consumed = True
        return self._stream

    def close(self) -> None:
        try:
            self._stream.close()
        except Exception:
            logger.debug("Ignoring failure while closing body stream", exc_info=True)

    def __repr__(self) -> str:
        return f"<StreamBody length={self._length} charset={self._charset}>"


def empty() -> EmptyBody:
    return EmptyBody()


def from_bytes(data: bytes | bytearray | memoryview, charset: str | None = None) -> BytesBody:
    return BytesBody(data, charset)


def from_text(text: str, charset: str = UTF_8) -> BytesBody:
    """Encode ``text``; characters the charset cannot represent become ``?``."""
    return BytesBody(text.encode(charset, errors="replace"), charset)


def from_stream(
    stream: BinaryIO,
    length: int | None = None,
    charset: str | None = None,
) -> StreamBody:
    return StreamBody(stream, length, charset)


def from_file(path: str | os.PathLike[str], charset: str | None = None) -> StreamBody:
    """
    Open a file as a stream body whose length is the file size.

    Raises:
        FileNotFoundError: If the file does not exist
    """
    stream = open(path, "rb")
    try:
        size = os.fstat(stream.fileno()).st_size
    except OSError:
        stream.close()
        raise
    return StreamBody(stream, size, charset)


def with_length(body: StreamBody, length: int) -> StreamBody:
    """
    Re-declare the length of a stream body, e.g. once Content-Length is known.

    Ownership of the stream moves to the returned body.
    """
    if body.consumed:
        raise BodyConsumedError("Stream-backed body has already been consumed")
    return StreamBody(body.as_stream(), length, body.charset)


def read_body(body: Body) -> bytes:
    """Read the full content, propagating I/O errors."""
    if isinstance(body, EmptyBody):
        return b""
    if isinstance(body, BytesBody):
        return body.data
    with body.as_stream() as stream:
        return stream.read()


def read_text(body: Body) -> str:
    """
    Read the full content as text using the body charset, else UTF-8.

    Undecodable bytes become U+FFFD; I/O errors propagate.
    """
    return read_body(body).decode(body.charset or UTF_8, errors="replace")


def body_as_bytes(body: Body) -> bytes | None:
    """Best-effort read for diagnostics; returns None instead of raising."""
    try:
        return read_body(body)
    except (OSError, ValueError, BodyConsumedError):
        return None


def body_as_string(body: Body) -> str | None:
    """Best-effort text read for diagnostics; returns None instead of raising."""
    data = body_as_bytes(body)
    if data is None:
        return None
    return data.decode(body.charset or UTF_8, errors="replace")


def as_text_stream(body: Body) -> TextIO | None:
    """Wrap the body stream in a text reader when the body declares a charset."""
    if body.charset is None:
        return None
    return io.TextIOWrapper(body.as_stream(), encoding=body.charset, errors="replace")


def transform_text(body: Body, func: Callable[[str], str]) -> BytesBody:
    """Return a new body holding ``func`` applied to the body text."""
    charset = body.charset or UTF_8
    return BytesBody(func(body_as_string(body) or "").encode(charset, errors="replace"), charset)


def describe(body: Body | None) -> str | None:
    """
    Render a body for ``Request``/``Response`` text output.

    Only repeatable bodies are read; textual ones render as text, binary or
    unreadable ones as a ``-- N length stream --`` placeholder. Returns None
    for bodies that must not be touched.
    """
    if body is None or not body.repeatable:
        return None
    text = body_as_string(body) if body.charset is not None or body.length == 0 else None
    if text is None:
        return f"-- {body.length} length stream --"
    return text
