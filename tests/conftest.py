"""Pytest configuration and fixtures."""

import io

import pytest
from tether.request import Request
from tether.response import Response


@pytest.fixture
def sample_request():
    """Create a sample GET Request."""
    return Request("GET", "https://api.example.com/repos", {"Accept": "application/json"})


@pytest.fixture
def sample_response(sample_request):
    """Create a sample textual Response."""
    return (
        Response.builder()
        .status(200)
        .reason("OK")
        .headers({"Content-Type": ["text/plain; charset=utf-8"]})
        .body_bytes(b"hello world")
        .request(sample_request)
        .build()
    )


@pytest.fixture
def broken_stream(mocker):
    """Binary stream whose read and close both fail."""
    stream = mocker.MagicMock(spec=io.BufferedReader)
    stream.read.side_effect = OSError("connection reset")
    stream.close.side_effect = OSError("already closed")
    stream.__enter__.return_value = stream
    stream.__exit__.return_value = False
    return stream
