"""Tests for the encoders in tether.codec."""

import datetime
import io

import pytest
from tether import body as bodies
from tether.codec import (
    DefaultEncoder,
    DispatchingEncoder,
    Encoder,
    StreamAndFileEncoder,
    type_name,
    type_tag,
)
from tether.errors import EncodeError
from tether.request import RequestBuilder


@pytest.fixture
def builder():
    return RequestBuilder("POST", "https://example.com/upload")


class TestDefaultEncoder:
    """Tests for DefaultEncoder."""

    def test_encodes_strings(self, builder):
        """Test strings become UTF-8 text bodies."""
        DefaultEncoder().encode("This is my content", str, builder)
        assert bodies.body_as_string(builder.body) == "This is my content"
        assert builder.body.charset == "utf-8"
        assert builder.headers["Content-Type"] == ["text/plain; charset=utf-8"]

    def test_string_uses_content_type_charset(self, builder):
        """Test strings are encoded with the charset already declared on the request."""
        builder.header("Content-Type", "text/plain; charset=UTF-16")
        DefaultEncoder().encode("héllo", str, builder)
        assert builder.body.charset == "utf-16"
        assert bodies.read_body(builder.body) == "héllo".encode("utf-16")
        assert builder.headers["Content-Type"] == ["text/plain; charset=UTF-16"]

    def test_unmappable_characters_replaced(self, builder):
        """Test characters the declared charset cannot represent are replaced."""
        builder.header("Content-Type", "text/plain; charset=US-ASCII")
        DefaultEncoder().encode("café", str, builder)
        assert builder.body.charset == "ascii"
        assert bodies.read_body(builder.body) == b"caf?"

    def test_encodes_byte_array(self, builder):
        """Test raw bytes become binary bodies."""
        content = bytes([12, 34, 56])
        DefaultEncoder().encode(content, bytes, builder)
        assert bodies.body_as_bytes(builder.body) == content
        assert builder.body.charset is None
        assert builder.headers["Content-Type"] == ["application/octet-stream"]

    def test_encodes_bytearray_without_declared_type(self, builder):
        """Test the runtime type is used when no type is declared."""
        DefaultEncoder().encode(bytearray(b"\x01\x02"), None, builder)
        assert bodies.read_body(builder.body) == b"\x01\x02"

    def test_existing_content_type_kept(self, builder):
        """Test an existing Content-Type is not overwritten."""
        builder.header("Content-Type", "application/vnd.custom")
        DefaultEncoder().encode(b"x", bytes, builder)
        assert builder.headers["Content-Type"] == ["application/vnd.custom"]

    def test_refuses_to_encode_other_types(self, builder):
        """Test unsupported types fail with a descriptive message."""
        with pytest.raises(EncodeError) as exc_info:
            DefaultEncoder().encode(datetime.datetime.now(), datetime.datetime, builder)
        assert "is not a type supported by this encoder." in str(exc_info.value)
        assert "datetime.datetime" in str(exc_info.value)

    def test_failure_leaves_body_unset(self, builder):
        """Test a failed encode does not touch the builder."""
        with pytest.raises(EncodeError):
            DefaultEncoder().encode(object(), object, builder)
        assert builder.body is None
        assert "Content-Type" not in builder.headers


class TestStreamAndFileEncoder:
    """Tests for StreamAndFileEncoder."""

    def test_encodes_stream(self, builder):
        """Test binary streams become single-use bodies."""
        stream = io.BytesIO(b"streamed")
        StreamAndFileEncoder().encode(stream, io.BytesIO, builder)
        assert isinstance(builder.body, bodies.StreamBody)
        assert builder.body.length is None
        assert builder.headers["Content-Type"] == ["application/octet-stream"]
        assert bodies.read_body(builder.body) == b"streamed"

    def test_encodes_open_file(self, builder, tmp_path):
        """Test an open binary file is streamed."""
        path = tmp_path / "data.bin"
        path.write_bytes(b"abc")
        with open(path, "rb") as f:
            StreamAndFileEncoder().encode(f, None, builder)
            assert bodies.read_body(builder.body) == b"abc"

    def test_rejects_text_stream(self, builder):
        """Test text-mode streams are refused."""
        with pytest.raises(EncodeError, match="binary mode"):
            StreamAndFileEncoder().encode(io.StringIO("x"), io.StringIO, builder)

    def test_encodes_path(self, builder, tmp_path):
        """Test paths are sent with their size as length."""
        path = tmp_path / "report.csv"
        path.write_bytes(b"a,b\n1,2\n")
        StreamAndFileEncoder().encode(path, type(path), builder)
        assert builder.body.length == 8
        assert bodies.read_body(builder.body) == b"a,b\n1,2\n"
        assert builder.headers["Content-Type"] == ["application/octet-stream"]

    def test_missing_file(self, builder, tmp_path):
        """Test a missing file fails with an encode error."""
        with pytest.raises(EncodeError, match="Unable to encode missing file"):
            StreamAndFileEncoder().encode(tmp_path / "missing", None, builder)

    def test_delegates_other_types(self, builder):
        """Test unknown types go to the delegate."""
        StreamAndFileEncoder(DefaultEncoder()).encode("text", str, builder)
        assert bodies.read_text(builder.body) == "text"

    def test_without_delegate_refuses(self, builder):
        """Test the encoder is terminal when it has no delegate."""
        with pytest.raises(EncodeError, match="is not a type supported by this encoder."):
            StreamAndFileEncoder().encode("text", str, builder)

    def test_specialized_cases_before_delegate(self, builder, mocker):
        """Test own converters run before the delegate is consulted."""
        delegate = mocker.Mock(spec=Encoder)
        StreamAndFileEncoder(delegate).encode(io.BytesIO(b"x"), io.BytesIO, builder)
        delegate.encode.assert_not_called()


class TestDispatchingEncoder:
    """Tests for registration based dispatch."""

    def test_encoder_requires_encode(self):
        """Test an Encoder subclass without encode cannot be instantiated."""

        class Incomplete(Encoder):
            pass

        with pytest.raises(TypeError):
            Incomplete()

    def test_register_custom_type(self, builder):
        """Test registered converters are used for their type and subclasses."""

        class Money:
            def __init__(self, cents):
                self.cents = cents

        class Euro(Money):
            pass

        def encode_money(obj, b):
            b.body = bodies.from_text(str(obj.cents))

        encoder = DispatchingEncoder(DefaultEncoder()).register(Money, encode_money)
        encoder.encode(Euro(250), None, builder)
        assert bodies.read_text(builder.body) == "250"
        assert encoder.supports(Euro)
        assert not encoder.supports(str)

    def test_generic_alias_dispatches_on_origin(self):
        """Test dict[str, int] dispatches like dict."""
        assert type_tag(dict[str, int]) is dict
        assert type_tag(str) is str
        assert type_tag("not a type") is None

    def test_type_name(self):
        """Test type names are readable."""
        assert type_name(str) == "str"
        assert type_name(datetime.date) == "datetime.date"
