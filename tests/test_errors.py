"""Tests for tether.errors module."""

import pytest
from tether.errors import BodyConsumedError, DecodeError, EncodeError, TetherError
from tether.request import Request


class TestErrorHierarchy:
    """Tests for error class hierarchy."""

    def test_tether_error_is_exception(self):
        """Test TetherError inherits from Exception."""
        assert issubclass(TetherError, Exception)

    @pytest.mark.parametrize("error", [EncodeError, DecodeError, BodyConsumedError])
    def test_errors_inherit_tether_error(self, error):
        """Test every error inherits from TetherError."""
        assert issubclass(error, TetherError)


class TestDecodeError:
    """Tests for DecodeError diagnostics."""

    def test_carries_status_and_request(self):
        """Test DecodeError exposes status, message and request."""
        request = Request("GET", "https://example.com")
        err = DecodeError(500, "cannot decode", request)
        assert err.status == 500
        assert err.request is request
        assert str(err) == "cannot decode"

    def test_request_optional(self):
        """Test DecodeError can be raised without a request."""
        with pytest.raises(DecodeError, match="no request"):
            raise DecodeError(400, "no request")


class TestErrorCatching:
    """Tests for catching errors at different hierarchy levels."""

    def test_catch_all_as_tether_error(self):
        """Test all custom errors can be caught as TetherError."""
        errors = [
            EncodeError("enc"),
            DecodeError(500, "dec"),
            BodyConsumedError("consumed"),
        ]
        for error in errors:
            with pytest.raises(TetherError):
                raise error
