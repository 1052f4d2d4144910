"""Tests for tether.jsoncodec module."""

import json

import pytest
from tether import body as bodies
from tether.codec import DefaultDecoder, DefaultEncoder
from tether.errors import DecodeError, EncodeError
from tether.jsoncodec import JsonDecoder, JsonEncoder
from tether.request import RequestBuilder
from tether.response import Response


@pytest.fixture
def builder():
    return RequestBuilder("POST", "https://example.com/items")


def _json_response(request, payload: bytes, status=200):
    return (
        Response.builder()
        .status(status)
        .headers({"Content-Type": "application/json"})
        .body_bytes(payload)
        .request(request)
        .build()
    )


class TestJsonEncoder:
    """Tests for JsonEncoder."""

    def test_encodes_dict(self, builder):
        """Test dicts are serialized with a JSON content type."""
        JsonEncoder().encode({"name": "tether", "tags": ["a"]}, dict, builder)
        assert json.loads(bodies.read_text(builder.body)) == {"name": "tether", "tags": ["a"]}
        assert builder.headers["Content-Type"] == ["application/json"]
        assert builder.body.charset == "utf-8"

    def test_encodes_generic_list(self, builder):
        """Test list[int] dispatches like list."""
        JsonEncoder().encode([1, 2, 3], list[int], builder)
        assert bodies.read_text(builder.body) == "[1, 2, 3]"

    def test_dumps_kwargs(self, builder):
        """Test extra json.dumps arguments are applied."""
        JsonEncoder(separators=(",", ":")).encode({"a": 1}, dict, builder)
        assert bodies.read_text(builder.body) == '{"a":1}'

    def test_unserializable_value(self, builder):
        """Test values json cannot serialize raise EncodeError."""
        with pytest.raises(EncodeError, match="JSON"):
            JsonEncoder().encode({"when": object()}, dict, builder)

    def test_delegates_strings(self, builder):
        """Test other types fall through to the delegate."""
        JsonEncoder(DefaultEncoder()).encode("plain", str, builder)
        assert builder.headers["Content-Type"] == ["text/plain; charset=utf-8"]

    def test_terminal_without_delegate(self, builder):
        """Test the encoder rejects other types without delegate."""
        with pytest.raises(EncodeError, match="is not a type supported by this encoder."):
            JsonEncoder().encode("plain", str, builder)


class TestJsonDecoder:
    """Tests for JsonDecoder."""

    def test_decodes_dict(self, sample_request):
        """Test JSON objects decode to dicts."""
        resp = _json_response(sample_request, b'{"key": "val"}')
        assert JsonDecoder().decode(resp, dict) == {"key": "val"}

    def test_decodes_list(self, sample_request):
        """Test JSON arrays decode to lists."""
        resp = _json_response(sample_request, b"[1, 2]")
        assert JsonDecoder().decode(resp, list[int]) == [1, 2]

    def test_blank_body_is_none(self, sample_request):
        """Test a blank body decodes to None."""
        assert JsonDecoder().decode(_json_response(sample_request, b"  "), dict) is None

    def test_invalid_json(self, sample_request):
        """Test invalid JSON raises DecodeError carrying the request."""
        resp = _json_response(sample_request, b"not json")
        with pytest.raises(DecodeError) as exc_info:
            JsonDecoder().decode(resp, dict)
        assert exc_info.value.request is sample_request
        assert exc_info.value.status == 200

    def test_not_found_is_none(self, sample_request):
        """Test 404 decodes to None."""
        resp = _json_response(sample_request, b'{"error": "missing"}', status=404)
        assert JsonDecoder().decode(resp, dict) is None

    def test_chained_with_default(self, sample_request):
        """Test the JSON decoder delegates str to the default decoder."""
        resp = _json_response(sample_request, b'{"a": 1}')
        assert JsonDecoder(DefaultDecoder()).decode(resp, str) == '{"a": 1}'
