"""
=============================================================================
HTTP REQUEST PARSER
=============================================================================

Reads one HTTP/1.1 request from a line-oriented byte stream and turns it
into a structured HTTPRequest.

=============================================================================
HTTP REQUEST ANATOMY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     HTTP REQUEST STRUCTURE                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │  ┌─ REQUEST LINE ─────────────────────────────────────────────────┐ │
    │  │    PUT /notes/today.txt HTTP/1.1\r\n                           │ │
    │  │    ─┬─ ────────┬─────── ────┬───                               │ │
    │  │   Method    Resource     Version                               │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    │  ┌─ HEADERS ──────────────────────────────────────────────────────┐ │
    │  │    Host: localhost:8080\r\n                                    │ │
    │  │    Content-Length: 11\r\n                                      │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    │  ┌─ EMPTY LINE ───────────────────────────────────────────────────┐ │
    │  │    \r\n                                                         │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    │  ┌─ BODY (only with Content-Length) ──────────────────────────────┐ │
    │  │    hello world                                                  │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
TOLERANT PARSING
=============================================================================

This parser is deliberately forgiving. It never rejects a request for its
shape, it just leaves fields empty:

    "GET /"                 → fewer than 3 tokens, method stays ""
                              (dispatch turns that into a 405)
    "GET / HTTP/1.1 extra"  → extra tokens are dropped
    "no colon here"         → header line skipped
    ": value"               → header line skipped (colon at position 0)
    (stream closed)         → empty request

The only hard failure is a Content-Length that is not a run of ASCII
digits (or that exceeds max_body_size, when a limit is set). The parser
raises HTTPParseError and the connection handler drops the connection
without answering.

The resource is kept EXACTLY as sent: no percent-decoding, no query string
splitting, no normalisation.

=============================================================================
"""

import io
import os
from dataclasses import dataclass, field
from typing import BinaryIO, Dict, Optional, Tuple


# Header names are matched literally, as sent by the client.
CONTENT_LENGTH = "Content-Length"

# Header bytes are decoded 1:1 so no byte is ever lost.
HEADER_ENCODING = "iso-8859-1"


class HTTPParseError(Exception):
    """
    Raised when a request cannot be read at all.

    Unlike malformed request lines, which are tolerated, this means the
    parser cannot know how many body bytes to consume, so there is no safe
    response to send.
    """


@dataclass
class HTTPRequest:
    """
    One parsed request.

    Attributes:
        method:         Method token, "" when the request line was malformed.
        resource:       Path as sent on the wire, undecoded.
        version:        Protocol token, informational only.
        headers:        Header name → value. Names keep the client's case
                        and lookups are case-sensitive.
        body:           Raw body bytes. Empty without Content-Length.
        client_address: (ip, port) of the peer, used for access logging.
    """

    method: str = ""
    resource: str = ""
    version: str = ""
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    client_address: Tuple[str, int] = ("", 0)

    @property
    def content_length(self) -> Optional[int]:
        """Declared Content-Length, or None if the header is absent or invalid."""
        value = self.headers.get(CONTENT_LENGTH)
        if value is None:
            return None
        try:
            return int(value)
        except ValueError:
            return None

    def get_header(self, name: str, default: str = "") -> str:
        """Get a header value by its exact name."""
        return self.headers.get(name, default)


class RequestParser:
    """
    Parses a single request from a binary, line-buffered stream.

    The stream is typically ``socket.makefile("rb")``; tests use
    ``io.BytesIO``. Reading blocks until the peer sends data or closes.

    Usage:
        parser = RequestParser(max_body_size=1024 * 1024)
        request = parser.parse(conn.reader, conn.address)
    """

    def __init__(self, max_body_size: Optional[int] = None):
        """
        Args:
            max_body_size: Largest Content-Length accepted. None = no limit.
        """
        self.max_body_size = max_body_size

    def parse(
        self,
        stream: BinaryIO,
        client_address: Tuple[str, int] = ("", 0),
    ) -> HTTPRequest:
        """
        Read one request from ``stream``.

        Returns:
            The parsed request. Unpopulated if the stream was already closed.

        Raises:
            HTTPParseError: Content-Length is not a usable byte count.
            OSError: The underlying socket failed.
        """
        request = HTTPRequest(client_address=client_address)

        raw_line = self._read_line(stream)
        if raw_line is None:
            return request

        # ─────────────────────────────────────────────────────────────────
        # REQUEST LINE
        # ─────────────────────────────────────────────────────────────────
        # Decoded like a filename so the resource maps back to the same
        # bytes on disk. Undecodable bytes survive as surrogate escapes.
        tokens = os.fsdecode(raw_line).split(" ")
        while tokens and not tokens[-1]:
            tokens.pop()
        if len(tokens) >= 3:
            request.method, request.resource, request.version = tokens[:3]

        # ─────────────────────────────────────────────────────────────────
        # HEADERS (until empty line or end of stream)
        # ─────────────────────────────────────────────────────────────────
        while True:
            raw_line = self._read_line(stream)
            if not raw_line:
                break
            line = raw_line.decode(HEADER_ENCODING)
            colon = line.find(":")
            if colon > 0:
                name = line[:colon].strip()
                value = line[colon + 1:].strip()
                request.headers[name] = value

        # ─────────────────────────────────────────────────────────────────
        # BODY
        # ─────────────────────────────────────────────────────────────────
        if CONTENT_LENGTH in request.headers:
            length = self._parse_content_length(request.headers[CONTENT_LENGTH])
            # A short read is not retried: the body is whatever arrived.
            request.body = stream.read(length) if length else b""

        return request

    def _read_line(self, stream: BinaryIO) -> Optional[bytes]:
        """Read one line without its terminator; None at end of stream."""
        raw = stream.readline()
        if not raw:
            return None
        return raw.rstrip(b"\r\n")

    def _parse_content_length(self, value: str) -> int:
        """
        Plain ASCII digits only. A sign ("+3", "-0"), whitespace inside the
        number, or hex is rejected rather than guessed at.
        """
        if not (value.isascii() and value.isdigit()):
            raise HTTPParseError(f"Invalid Content-Length: {value!r}")

        length = int(value)
        if self.max_body_size is not None and length > self.max_body_size:
            raise HTTPParseError(
                f"Content-Length {length} exceeds limit of {self.max_body_size} bytes"
            )
        return length


def parse_request(data: bytes, max_body_size: Optional[int] = None) -> HTTPRequest:
    """
    Parse a complete request held in memory.

    Convenience wrapper for tests and tools:

        request = parse_request(b"GET / HTTP/1.1\\r\\n\\r\\n")
    """
    return RequestParser(max_body_size=max_body_size).parse(io.BytesIO(data))
