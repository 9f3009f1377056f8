"""Incremental parser for a raw HTTP/1.1 response.

The parser is fed bytes as they arrive from the socket and moves through
explicit states::

    AWAITING_STATUS_LINE -> AWAITING_HEADER_END -> READING_BODY -> DONE

Any violation moves it to FAILED and raises HttpProtocolError.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum

from hostsnap.constants import MAX_RESPONSE_BYTES
from hostsnap.exceptions import HttpProtocolError

try:
    import zlib
except ImportError:  # interpreter built without zlib
    zlib = None

CRLF = b"\r\n"

_CHUNK_SIZE = re.compile(rb"[0-9A-Fa-f]+")


class ParserState(str, Enum):
    """States of the response parser."""

    AWAITING_STATUS_LINE = "awaiting_status_line"
    AWAITING_HEADER_END = "awaiting_header_end"
    READING_BODY = "reading_body"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class HttpResponse:
    """A fully received HTTP response.

    Attributes
    ----------
    protocol : str
        Protocol token of the status line, e.g. "HTTP/1.1"
    status_code : int
        Numeric status code
    reason : str
        Reason phrase, possibly empty
    headers : dict[str, str]
        Header fields keyed by lowercase name
    body : bytes
        Body with transfer and content encodings removed
    """

    protocol: str
    status_code: int
    reason: str = ""
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    def text(self) -> str:
        """Decode the body as UTF-8.

        Raises
        ------
        HttpProtocolError
            If the body is not valid UTF-8
        """
        try:
            return self.body.decode("utf-8")
        except UnicodeDecodeError as e:
            raise HttpProtocolError(f"Response body is not UTF-8: {e}", self.status_code) from e


class ResponseParser:
    """State machine turning raw response bytes into an HttpResponse.

    Parameters
    ----------
    expected_status : int | None
        Status code the response must carry; any other code fails the parse
        as soon as the status line is read. None accepts every code.
    max_size : int
        Maximum number of bytes accepted (default: MAX_RESPONSE_BYTES)
    """

    def __init__(
        self, expected_status: int | None = None, max_size: int = MAX_RESPONSE_BYTES
    ) -> None:
        self.expected_status = expected_status
        self.max_size = max_size
        self.state = ParserState.AWAITING_STATUS_LINE
        self._buffer = bytearray()
        self._received = 0
        self._protocol = ""
        self._status_code = 0
        self._reason = ""
        self._headers: dict[str, str] = {}
        self._body = bytearray()

    @property
    def status_code(self) -> int | None:
        """Parsed status code, or None before the status line was read."""
        return self._status_code or None

    def _fail(self, message: str) -> HttpProtocolError:
        self.state = ParserState.FAILED
        return HttpProtocolError(message, self.status_code)

    def feed(self, data: bytes) -> None:
        """Consume the next chunk of response bytes.

        Parameters
        ----------
        data : bytes
            Bytes as received from the transport

        Raises
        ------
        HttpProtocolError
            If the response is malformed, too large, or carries an
            unexpected status code
        """
        if self.state is ParserState.FAILED:
            raise HttpProtocolError("Parser already failed", self.status_code)

        if self.state is ParserState.DONE:
            return

        self._received += len(data)
        if self._received > self.max_size:
            raise self._fail(f"Response exceeds {self.max_size} bytes")

        if self.state is ParserState.READING_BODY:
            self._body.extend(data)
            self._check_body_complete()
            return

        self._buffer.extend(data)

        while self.state in (
            ParserState.AWAITING_STATUS_LINE,
            ParserState.AWAITING_HEADER_END,
        ):
            line_end = self._buffer.find(CRLF)
            if line_end == -1:
                return

            line = bytes(self._buffer[:line_end])
            del self._buffer[: line_end + len(CRLF)]

            if self.state is ParserState.AWAITING_STATUS_LINE:
                self._parse_status_line(line)
            elif line:
                self._parse_header(line)
            else:
                self.state = ParserState.READING_BODY

        self._body.extend(self._buffer)
        self._buffer.clear()
        self._check_body_complete()

    def _parse_status_line(self, line: bytes) -> None:
        # e.g. HTTP/1.1 200 OK
        try:
            text = line.decode("ascii")
        except UnicodeDecodeError as e:
            raise self._fail("Status line is not ASCII") from e

        protocol, _, rest = text.partition(" ")
        code, _, reason = rest.partition(" ")

        if not protocol.startswith("HTTP/"):
            raise self._fail(f"Invalid status line: {text!r}")

        if len(code) != 3 or not code.isdigit():
            raise self._fail(f"Invalid status code in status line: {text!r}")

        self._protocol = protocol
        self._status_code = int(code)
        self._reason = reason.strip()

        if self.expected_status is not None and self._status_code != self.expected_status:
            raise self._fail(f"Unexpected HTTP status: {self._status_code} {self._reason}".rstrip())

        self.state = ParserState.AWAITING_HEADER_END

    def _parse_header(self, line: bytes) -> None:
        text = line.decode("latin-1")
        name, separator, value = text.partition(":")

        if not separator or not name.strip():
            raise self._fail(f"Invalid header line: {text!r}")

        self._headers[name.strip().lower()] = value.strip()

    def _content_length(self) -> int | None:
        value = self._headers.get("content-length")
        if value is None:
            return None

        if not (value.isascii() and value.isdigit()):
            raise self._fail(f"Invalid Content-Length: {value!r}")

        return int(value)

    def _check_body_complete(self) -> None:
        if self.state is not ParserState.READING_BODY:
            return

        length = self._content_length()
        if length is not None and len(self._body) >= length:
            del self._body[length:]
            self.state = ParserState.DONE

    def finish(self) -> HttpResponse:
        """Complete the parse once the peer closed the connection.

        Returns
        -------
        HttpResponse
            The received response with encodings removed

        Raises
        ------
        HttpProtocolError
            If the header/body separator never arrived, the body is shorter
            than its Content-Length, or the body cannot be decoded
        """
        if self.state is ParserState.FAILED:
            raise HttpProtocolError("Parser already failed", self.status_code)

        if self.state is ParserState.AWAITING_STATUS_LINE:
            raise self._fail("Connection closed before the status line")

        if self.state is ParserState.AWAITING_HEADER_END:
            raise self._fail("Connection closed before the end of the headers")

        length = self._content_length()
        if length is not None and len(self._body) < length:
            raise self._fail(f"Truncated body: got {len(self._body)} of {length} bytes")

        body = bytes(self._body)

        if self._headers.get("transfer-encoding", "").lower() == "chunked":
            body = self._dechunk(body)

        body = self._decode_content(body)

        self.state = ParserState.DONE

        return HttpResponse(
            protocol=self._protocol,
            status_code=self._status_code,
            reason=self._reason,
            headers=dict(self._headers),
            body=body,
        )

    def _dechunk(self, data: bytes) -> bytes:
        decoded = bytearray()
        position = 0

        while True:
            line_end = data.find(CRLF, position)
            if line_end == -1:
                raise self._fail("Truncated chunked body")

            size_field = data[position:line_end].split(b";", 1)[0].strip()
            if not _CHUNK_SIZE.fullmatch(size_field):
                raise self._fail(f"Invalid chunk size: {size_field!r}")

            size = int(size_field, 16)

            if size == 0:
                return bytes(decoded)

            start = line_end + len(CRLF)
            end = start + size
            if end > len(data):
                raise self._fail("Truncated chunked body")

            decoded.extend(data[start:end])
            position = end + len(CRLF)

    def _decode_content(self, body: bytes) -> bytes:
        encoding = self._headers.get("content-encoding", "identity").lower()

        if encoding in ("", "identity"):
            return body

        if encoding == "gzip" and zlib is not None:
            try:
                return zlib.decompress(body, 16 + zlib.MAX_WBITS)
            except zlib.error as e:
                raise self._fail(f"Invalid gzip body: {e}") from e

        raise self._fail(f"Unsupported Content-Encoding: {encoding}")
