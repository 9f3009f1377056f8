"""Tests for the incremental HTTP response parser."""

import gzip

import pytest

from hostsnap.exceptions import HttpProtocolError
from hostsnap.services.http import ParserState, ResponseParser


def feed_all(parser: ResponseParser, data: bytes, chunk_size: int = 5) -> None:
    for start in range(0, len(data), chunk_size):
        parser.feed(data[start : start + chunk_size])


class TestParserStates:
    """Tests for state transitions as bytes arrive."""

    def test_starts_awaiting_status_line(self) -> None:
        assert ResponseParser().state is ParserState.AWAITING_STATUS_LINE

    def test_status_line_moves_to_headers(self) -> None:
        parser = ResponseParser()

        parser.feed(b"HTTP/1.1 200 OK\r\n")

        assert parser.state is ParserState.AWAITING_HEADER_END
        assert parser.status_code == 200

    def test_partial_status_line_waits_for_terminator(self) -> None:
        parser = ResponseParser()

        parser.feed(b"HTTP/1.1 20")

        assert parser.state is ParserState.AWAITING_STATUS_LINE
        assert parser.status_code is None

    def test_blank_line_moves_to_body(self) -> None:
        parser = ResponseParser()

        parser.feed(b"HTTP/1.1 200 OK\r\nServer: test\r\n\r\n")

        assert parser.state is ParserState.READING_BODY

    def test_content_length_completes_response(self) -> None:
        parser = ResponseParser()

        feed_all(parser, b"HTTP/1.1 200 OK\r\nContent-Length: 4\r\n\r\nabcdEXTRA")

        assert parser.state is ParserState.DONE
        assert parser.finish().body == b"abcd"

    def test_body_read_until_close_without_length(self) -> None:
        parser = ResponseParser()

        feed_all(parser, b"HTTP/1.0 200 OK\r\n\r\n198.51.100.7\n")
        response = parser.finish()

        assert response.protocol == "HTTP/1.0"
        assert response.reason == "OK"
        assert response.body == b"198.51.100.7\n"

    def test_headers_are_case_insensitive(self) -> None:
        parser = ResponseParser()

        feed_all(parser, b"HTTP/1.1 200 OK\r\nCONTENT-type: text/plain\r\n\r\n")

        assert parser.finish().headers == {"content-type": "text/plain"}


class TestParserFailures:
    """Tests for protocol violations."""

    def test_missing_separator_fails_on_close(self) -> None:
        parser = ResponseParser()
        parser.feed(b"HTTP/1.1 200 OK\r\nContent-Length: 3\r\n")

        with pytest.raises(HttpProtocolError, match="end of the headers"):
            parser.finish()

        assert parser.state is ParserState.FAILED

    def test_empty_response_fails(self) -> None:
        with pytest.raises(HttpProtocolError, match="status line"):
            ResponseParser().finish()

    def test_truncated_body_fails(self) -> None:
        parser = ResponseParser()
        parser.feed(b"HTTP/1.1 200 OK\r\nContent-Length: 20\r\n\r\n203.0.113.5")

        with pytest.raises(HttpProtocolError, match="Truncated body"):
            parser.finish()

    def test_unexpected_status_fails_immediately(self) -> None:
        parser = ResponseParser(expected_status=200)

        with pytest.raises(HttpProtocolError) as exc_info:
            parser.feed(b"HTTP/1.1 404 Not Found\r\n")

        assert exc_info.value.status_code == 404
        assert parser.state is ParserState.FAILED

    def test_invalid_status_line_fails(self) -> None:
        with pytest.raises(HttpProtocolError, match="Invalid status line"):
            ResponseParser().feed(b"SSH-2.0-OpenSSH_9.6\r\n")

    def test_invalid_status_code_fails(self) -> None:
        with pytest.raises(HttpProtocolError, match="Invalid status code"):
            ResponseParser().feed(b"HTTP/1.1 OK\r\n")

    @pytest.mark.parametrize("value", [b"\xb2", b"12abc", b"-1", b"1_0"])
    def test_invalid_content_length_fails(self, value: bytes) -> None:
        parser = ResponseParser()

        with pytest.raises(HttpProtocolError, match="Invalid Content-Length"):
            parser.feed(b"HTTP/1.1 200 OK\r\nContent-Length: " + value + b"\r\n\r\n")

        assert parser.state is ParserState.FAILED

    def test_header_without_colon_fails(self) -> None:
        with pytest.raises(HttpProtocolError, match="Invalid header line"):
            ResponseParser().feed(b"HTTP/1.1 200 OK\r\nnot a header\r\n")

    def test_oversized_response_fails(self) -> None:
        parser = ResponseParser(max_size=16)

        with pytest.raises(HttpProtocolError, match="exceeds"):
            parser.feed(b"HTTP/1.1 200 OK\r\n\r\n" + b"x" * 32)

    def test_feed_after_failure_raises(self) -> None:
        parser = ResponseParser(expected_status=200)
        with pytest.raises(HttpProtocolError):
            parser.feed(b"HTTP/1.1 500 Internal Server Error\r\n")

        with pytest.raises(HttpProtocolError, match="already failed"):
            parser.feed(b"more")

    def test_non_utf8_body_fails_text_decoding(self) -> None:
        parser = ResponseParser()
        parser.feed(b"HTTP/1.1 200 OK\r\n\r\n\xff\xfe")

        with pytest.raises(HttpProtocolError):
            parser.finish().text()


class TestBodyDecoding:
    """Tests for transfer and content encodings."""

    def test_chunked_body(self) -> None:
        parser = ResponseParser()
        feed_all(
            parser,
            b"HTTP/1.1 200 OK\r\nTransfer-Encoding: chunked\r\n\r\n"
            b"4\r\n203.\r\n7;ext=1\r\n0.113.5\r\n0\r\n\r\n",
        )

        assert parser.finish().body == b"203.0.113.5"

    def test_truncated_chunked_body_fails(self) -> None:
        parser = ResponseParser()
        parser.feed(b"HTTP/1.1 200 OK\r\nTransfer-Encoding: chunked\r\n\r\nA\r\n203.")

        with pytest.raises(HttpProtocolError, match="chunked"):
            parser.finish()

    @pytest.mark.parametrize("size", [b"-5", b"1_0", b"0x5", b"+5", b""])
    def test_invalid_chunk_size_fails(self, size: bytes) -> None:
        parser = ResponseParser()
        parser.feed(
            b"HTTP/1.1 200 OK\r\nTransfer-Encoding: chunked\r\n\r\n"
            + size
            + b"\r\n203.0.113.5\r\n0\r\n\r\n"
        )

        with pytest.raises(HttpProtocolError, match="Invalid chunk size"):
            parser.finish()

        assert parser.state is ParserState.FAILED

    def test_gzip_body(self) -> None:
        compressed = gzip.compress(b"203.0.113.5\n")
        parser = ResponseParser()
        feed_all(
            parser,
            b"HTTP/1.1 200 OK\r\nContent-Encoding: gzip\r\n"
            + f"Content-Length: {len(compressed)}\r\n\r\n".encode()
            + compressed,
        )

        assert parser.finish().text() == "203.0.113.5\n"

    def test_corrupt_gzip_body_fails(self) -> None:
        parser = ResponseParser()
        parser.feed(b"HTTP/1.1 200 OK\r\nContent-Encoding: gzip\r\n\r\nnot gzip")

        with pytest.raises(HttpProtocolError, match="gzip"):
            parser.finish()

    def test_unsupported_encoding_fails(self) -> None:
        parser = ResponseParser()
        parser.feed(b"HTTP/1.1 200 OK\r\nContent-Encoding: br\r\n\r\nxx")

        with pytest.raises(HttpProtocolError, match="Unsupported"):
            parser.finish()
