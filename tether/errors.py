from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tether.request import Request


class TetherError(Exception):
    """Base error for Tether."""


class EncodeError(TetherError):
    """Raised when a value cannot be converted into a request body."""


class DecodeError(TetherError):
    """
    Raised when a response body cannot be converted into the requested type.

    Carries the response status and the originating request for diagnostics.
    """

    def __init__(self, status: int, message: str, request: Request | None = None) -> None:
        super().__init__(message)
        self.status = status
        self.request = request


class BodyConsumedError(TetherError):
    """Raised when a single-use body stream is requested a second time."""
