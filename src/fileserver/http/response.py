"""
=============================================================================
HTTP RESPONSE BUILDING
=============================================================================

Response objects and the fixed responses the file server sends.

=============================================================================
BYTE-EXACT OUTPUT
=============================================================================

Every response is rendered from exactly the headers that were set, in the
order they were set. Nothing is added behind the caller's back (no Date,
no Server), so the bytes on the wire are fully predictable:

    HTTP/1.1 404 Not Found\r\n
    Content-Type: text/html\r\n
    Content-Length: 22\r\n
    Connection: close\r\n
    \r\n
    <h1>404 Not Found</h1>

Content-Length is always computed from the body that is actually sent.
The one exception is HEAD, which advertises the length of the body a GET
would have returned while sending none (see file_response()).

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Dict, Union

from .status_codes import HTTPStatus


NOT_FOUND_BODY = b"<h1>404 Not Found</h1>"
METHOD_NOT_ALLOWED_BODY = b"<h1>405 Method Not Allowed</h1>"

HTML_CONTENT_TYPE = "text/html"


@dataclass
class HTTPResponse:
    """
    Represents an HTTP response to be sent to the client.

        Handler returns          to_bytes()              Socket sends
        HTTPResponse    ─────►   serializes    ─────►    raw bytes
    """

    status: HTTPStatus = HTTPStatus.OK
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    version: str = "HTTP/1.1"

    @property
    def status_line(self) -> str:
        """
        Format: HTTP-VERSION SP STATUS-CODE SP REASON-PHRASE

        Example: "HTTP/1.1 200 OK"
        """
        return f"{self.version} {int(self.status)} {self.status.phrase}"

    def set_header(self, name: str, value: str) -> "HTTPResponse":
        """Set a response header. Returns self for chaining."""
        self.headers[name] = value
        return self

    def to_bytes(self) -> bytes:
        """
        Serialize the response for ``socket.sendall()``.

        Status line, one line per header, an empty line, then the body.
        All lines end with CRLF.
        """
        lines = [self.status_line]
        for name, value in self.headers.items():
            lines.append(f"{name}: {value}")
        lines.append("")

        head = "\r\n".join(lines).encode("iso-8859-1") + b"\r\n"
        return head + self.body


class ResponseBuilder:
    """
    Fluent builder for constructing HTTP responses.

        response = (ResponseBuilder()
            .status(HTTPStatus.CREATED)
            .content_type("text/html")
            .body(b"")
            .close_connection()
            .build())

    body() also sets Content-Length, so headers come out in the order
    Content-Type, Content-Length, Connection when called as above.
    """

    def __init__(self):
        self._status = HTTPStatus.OK
        self._headers: Dict[str, str] = {}
        self._body: bytes = b""

    def status(self, status: HTTPStatus) -> "ResponseBuilder":
        self._status = status
        return self

    def header(self, name: str, value: str) -> "ResponseBuilder":
        self._headers[name] = value
        return self

    def content_type(self, content_type: str) -> "ResponseBuilder":
        return self.header("Content-Type", content_type)

    def content_length(self, length: int) -> "ResponseBuilder":
        return self.header("Content-Length", str(length))

    def body(self, body: Union[str, bytes]) -> "ResponseBuilder":
        """
        Set the body and its Content-Length.

        Strings are encoded as UTF-8.
        """
        if isinstance(body, str):
            body = body.encode("utf-8")
        self._body = body
        return self.content_length(len(body))

    def close_connection(self) -> "ResponseBuilder":
        """Every connection is closed after one response; say so."""
        return self.header("Connection", "close")

    def build(self) -> HTTPResponse:
        return HTTPResponse(
            status=self._status,
            headers=dict(self._headers),
            body=self._body,
        )


# =============================================================================
# FIXED RESPONSES
# =============================================================================

def file_response(content: bytes, content_type: str, include_body: bool = True) -> HTTPResponse:
    """
    200 OK carrying a file.

    With include_body=False (HEAD) the header block is identical, including
    Content-Length, but no body bytes follow.
    """
    response = (ResponseBuilder()
        .content_type(content_type)
        .body(content)
        .close_connection()
        .build())
    if not include_body:
        response.body = b""
    return response


def _empty(status: HTTPStatus) -> HTTPResponse:
    return (ResponseBuilder()
        .status(status)
        .content_type(HTML_CONTENT_TYPE)
        .body(b"")
        .close_connection()
        .build())


def created() -> HTTPResponse:
    """201 Created, sent after POST."""
    return _empty(HTTPStatus.CREATED)


def stored_ok() -> HTTPResponse:
    """200 OK with an empty body, sent after PUT."""
    return _empty(HTTPStatus.OK)


def no_content() -> HTTPResponse:
    """204 No Content, sent after a successful DELETE."""
    return (ResponseBuilder()
        .status(HTTPStatus.NO_CONTENT)
        .close_connection()
        .build())


def _error(status: HTTPStatus, body: bytes) -> HTTPResponse:
    return (ResponseBuilder()
        .status(status)
        .content_type(HTML_CONTENT_TYPE)
        .body(body)
        .close_connection()
        .build())


def not_found() -> HTTPResponse:
    """404 Not Found with the fixed HTML body."""
    return _error(HTTPStatus.NOT_FOUND, NOT_FOUND_BODY)


def method_not_allowed() -> HTTPResponse:
    """405 Method Not Allowed with the fixed HTML body."""
    return _error(HTTPStatus.METHOD_NOT_ALLOWED, METHOD_NOT_ALLOWED_BODY)
