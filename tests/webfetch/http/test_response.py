"""
Tests for response head parsing.

Test coverage:
- Line reader termination, trimming and end-of-stream handling
- Status line parsing and malformed status lines
- Header block order, Content-Length extraction and tolerance
- Stream positioning at the first body byte
- Body iteration
"""

import io
import logging

import pytest

from webfetch.errors.exceptions import (
    IncompleteLineError,
    MalformedResponseError,
    ProtocolError,
)
from webfetch.http.response import (
    UNKNOWN_LENGTH,
    ResponseHead,
    iter_body,
    parse_content_length,
    parse_status_line,
    read_line,
    read_response_head,
)


class OneByteStream(io.RawIOBase):
    """Stream that never returns more than one byte per read."""

    def __init__(self, data: bytes):
        super().__init__()
        self._data = io.BytesIO(data)

    def readable(self):
        return True

    def read(self, size=-1):
        return self._data.read(1 if size != 0 else 0)


class TestReadLine:
    """Test the CR LF line reader."""

    def test_reads_up_to_crlf(self):
        """Terminator is consumed but not returned."""
        stream = io.BytesIO(b"first\r\nsecond\r\n")

        assert read_line(stream) == "first"
        assert read_line(stream) == "second"

    def test_strips_trailing_whitespace(self):
        """Trailing spaces and tabs are dropped."""
        assert read_line(io.BytesIO(b"value \t \r\n")) == "value"

    def test_keeps_leading_whitespace(self):
        """Only trailing whitespace is removed."""
        assert read_line(io.BytesIO(b"  folded\r\n")) == "  folded"

    def test_bare_lf_does_not_terminate(self):
        """Only the CR LF pair ends a line."""
        stream = io.BytesIO(b"a\nb\r\nrest")

        assert read_line(stream) == "a\nb"
        assert stream.read() == b"rest"

    def test_empty_line(self):
        """A lone CR LF is the empty line."""
        assert read_line(io.BytesIO(b"\r\n")) == ""

    def test_end_of_stream_before_terminator(self):
        """Running out of bytes raises IncompleteLineError with the partial data."""
        with pytest.raises(IncompleteLineError) as exc_info:
            read_line(io.BytesIO(b"HTTP/1.1 20"))

        assert exc_info.value.partial == b"HTTP/1.1 20"

    def test_does_not_read_past_terminator(self):
        """The stream is left right after CR LF."""
        stream = io.BytesIO(b"line\r\nBODY")
        read_line(stream)

        assert stream.tell() == 6

    def test_non_ascii_bytes_do_not_fail(self):
        """Header bytes are decoded one-to-one."""
        assert read_line(io.BytesIO(b"X-Name: caf\xe9\r\n")) == "X-Name: café"


class TestParseStatusLine:
    """Test status code extraction."""

    @pytest.mark.parametrize(
        "line,code",
        [
            ("HTTP/1.1 200 OK", 200),
            ("HTTP/1.0 404 Not Found", 404),
            ("HTTP/1.1 500", 500),
            ("HTTP/1.1   301   Moved Permanently", 301),
        ],
    )
    def test_valid(self, line, code):
        """Second whitespace-delimited token is the code."""
        assert parse_status_line(line) == code

    @pytest.mark.parametrize(
        "line",
        ["HTTP/1.1 OK", "HTTP/1.1", "", "HTTP/1.1 2_00 OK", "HTTP/1.1 -200 OK"],
    )
    def test_malformed(self, line):
        """Missing or non-numeric code raises MalformedResponseError."""
        with pytest.raises(MalformedResponseError):
            parse_status_line(line)


class TestParseContentLength:
    """Test Content-Length header recognition."""

    def test_other_header(self):
        """Headers with other names are ignored."""
        assert parse_content_length("Content-Type: text/html") is None

    @pytest.mark.parametrize(
        "line",
        ["Content-Length: 5", "content-length:5", "CONTENT-LENGTH :  5  "],
    )
    def test_case_and_spacing(self, line):
        """Name match is case-insensitive and surrounding spaces are ignored."""
        assert parse_content_length(line) == 5

    @pytest.mark.parametrize("value", ["abc", "", "-5", "5 5", "0x10"])
    def test_malformed_value(self, value, caplog):
        """Bad values yield UNKNOWN_LENGTH and a warning, never an error."""
        with caplog.at_level(logging.WARNING, logger="webfetch.http.response"):
            assert parse_content_length(f"Content-Length: {value}") == UNKNOWN_LENGTH

        assert "Content-Length" in caplog.text


class TestReadResponseHead:
    """Test full head parsing and stream positioning."""

    def test_status_headers_and_body_remainder(self):
        """Head is parsed and exactly the body bytes remain unread."""
        stream = io.BytesIO(b"HTTP/1.1 200 OK\r\nContent-Length: 5\r\n\r\nhello")

        head = read_response_head(stream)

        assert head.status_code == 200
        assert head.content_length == 5
        assert head.status_line == "HTTP/1.1 200 OK"
        assert stream.read() == b"hello"

    def test_positions_correctly_on_unbuffered_stream(self):
        """Byte-at-a-time transports still leave the body intact."""
        stream = OneByteStream(b"HTTP/1.1 200 OK\r\nA: b\r\n\r\n\r\nbody\r\n")

        head = read_response_head(stream)

        assert head.header_lines == ("A: b",)
        assert b"".join(iter_body(stream)) == b"\r\nbody\r\n"

    def test_header_order_and_text_preserved(self):
        """Header lines keep their order and original text."""
        stream = io.BytesIO(
            b"HTTP/1.1 200 OK\r\n"
            b"Server: test\r\n"
            b"X-Custom:  spaced value\r\n"
            b"Set-Cookie: a=1\r\n"
            b"Set-Cookie: b=2\r\n"
            b"\r\n"
        )

        head = read_response_head(stream)

        assert head.header_lines == (
            "Server: test",
            "X-Custom:  spaced value",
            "Set-Cookie: a=1",
            "Set-Cookie: b=2",
        )
        assert head.header_block == (
            "Server: test\nX-Custom:  spaced value\nSet-Cookie: a=1\nSet-Cookie: b=2\n"
        )

    def test_malformed_content_length_is_tolerated(self):
        """A bad Content-Length leaves length unknown and the head intact."""
        stream = io.BytesIO(
            b"HTTP/1.1 200 OK\r\nContent-Length: abc\r\nServer: x\r\n\r\nbody"
        )

        head = read_response_head(stream)

        assert head.status_code == 200
        assert head.content_length == UNKNOWN_LENGTH
        assert head.header_lines == ("Content-Length: abc", "Server: x")
        assert stream.read() == b"body"

    def test_missing_content_length(self):
        """No Content-Length means -1."""
        head = read_response_head(io.BytesIO(b"HTTP/1.1 204 No Content\r\n\r\n"))

        assert head.content_length == UNKNOWN_LENGTH
        assert head.header_lines == ()
        assert head.header_block == ""

    def test_status_line_without_code(self):
        """Status line lacking a numeric token raises MalformedResponseError."""
        with pytest.raises(MalformedResponseError):
            read_response_head(io.BytesIO(b"HTTP/1.1 OK\r\n\r\n"))

    @pytest.mark.parametrize("data", [b"", b"HTTP/1.1 200 OK", b"HTTP/1.1 200 OK\r"])
    def test_stream_ends_in_status_line(self, data):
        """Truncation before the status line ends raises ProtocolError."""
        with pytest.raises(ProtocolError, match="status line"):
            read_response_head(io.BytesIO(data))

    @pytest.mark.parametrize(
        "data",
        [
            b"HTTP/1.1 200 OK\r\n",
            b"HTTP/1.1 200 OK\r\nServer: x\r\n",
            b"HTTP/1.1 200 OK\r\nServer: x",
        ],
    )
    def test_stream_ends_in_header_block(self, data):
        """Truncation before the blank line raises ProtocolError."""
        with pytest.raises(ProtocolError, match="header block") as exc_info:
            read_response_head(io.BytesIO(data))

        assert not isinstance(exc_info.value, IncompleteLineError)

    def test_does_not_close_stream(self):
        """The parser never closes what it reads from."""
        stream = io.BytesIO(b"HTTP/1.1 200 OK\r\n\r\n")
        read_response_head(stream)

        assert not stream.closed


class TestResponseHead:
    """Test ResponseHead helpers."""

    def test_get_header_case_insensitive(self):
        """Lookup ignores case and returns the first match."""
        head = ResponseHead(
            status_line="HTTP/1.1 200 OK",
            status_code=200,
            header_lines=("Content-Type: text/html", "content-type: text/plain"),
        )

        assert head.get_header("CONTENT-TYPE") == "text/html"
        assert head.get_header("Server") is None

    def test_is_ok(self):
        """Only 200 counts as ok."""
        assert ResponseHead("HTTP/1.1 200 OK", 200).is_ok
        assert not ResponseHead("HTTP/1.1 201 Created", 201).is_ok

    def test_defaults(self):
        """Length defaults to unknown, headers to empty."""
        head = ResponseHead("HTTP/1.1 200 OK", 200)

        assert head.content_length == -1
        assert head.header_lines == ()


class TestIterBody:
    """Test body chunk iteration."""

    def test_reads_to_end_of_stream(self):
        """All remaining bytes are yielded in order."""
        data = bytes(range(256)) * 40
        chunks = list(iter_body(io.BytesIO(data), chunk_size=1000))

        assert b"".join(chunks) == data
        assert all(len(c) <= 1000 for c in chunks)

    def test_empty_body(self):
        """An exhausted stream yields nothing."""
        assert list(iter_body(io.BytesIO(b""))) == []

    def test_is_lazy(self):
        """Nothing is read until iteration starts."""
        stream = io.BytesIO(b"data")
        body = iter_body(stream)

        assert stream.tell() == 0
        assert next(body) == b"data"
