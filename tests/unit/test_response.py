"""
Unit tests for HTTP response building.
"""

from fileserver.http.response import (
    HTTPResponse,
    ResponseBuilder,
    created,
    file_response,
    method_not_allowed,
    no_content,
    not_found,
    stored_ok,
)
from fileserver.http.status_codes import HTTPStatus


class TestHTTPStatus:
    """Tests for the status code enum."""

    def test_codes_and_phrases(self):
        assert [(int(s), s.phrase) for s in HTTPStatus] == [
            (200, "OK"),
            (201, "Created"),
            (204, "No Content"),
            (404, "Not Found"),
            (405, "Method Not Allowed"),
        ]

    def test_success_and_error(self):
        assert HTTPStatus.NO_CONTENT.is_success
        assert not HTTPStatus.NO_CONTENT.is_error
        assert HTTPStatus.NOT_FOUND.is_error


class TestHTTPResponse:
    """Tests for HTTPResponse class."""

    def test_status_line(self):
        response = HTTPResponse(status=HTTPStatus.CREATED)
        assert response.status_line == "HTTP/1.1 201 Created"

    def test_to_bytes_keeps_header_order(self):
        response = HTTPResponse(body=b"xy")
        response.set_header("B", "2").set_header("A", "1")

        assert response.to_bytes() == b"HTTP/1.1 200 OK\r\nB: 2\r\nA: 1\r\n\r\nxy"

    def test_no_headers_are_added_implicitly(self):
        response = HTTPResponse(status=HTTPStatus.NO_CONTENT)

        assert response.to_bytes() == b"HTTP/1.1 204 No Content\r\n\r\n"


class TestResponseBuilder:
    """Tests for ResponseBuilder class."""

    def test_body_sets_content_length(self):
        response = ResponseBuilder().body(b"hello").build()

        assert response.headers == {"Content-Length": "5"}
        assert response.body == b"hello"

    def test_string_body_is_utf8(self):
        response = ResponseBuilder().body("héllo").build()

        assert response.body == "héllo".encode("utf-8")
        assert response.headers["Content-Length"] == "6"

    def test_builder_chain(self):
        response = (ResponseBuilder()
            .status(HTTPStatus.NOT_FOUND)
            .content_type("text/plain")
            .close_connection()
            .build())

        assert response.status == HTTPStatus.NOT_FOUND
        assert list(response.headers) == ["Content-Type", "Connection"]


class TestFixedResponses:
    """The exact bytes of every response the server sends."""

    def test_file_response(self):
        response = file_response(b"hello", "text/plain")

        assert response.to_bytes() == (
            b"HTTP/1.1 200 OK\r\n"
            b"Content-Type: text/plain\r\n"
            b"Content-Length: 5\r\n"
            b"Connection: close\r\n"
            b"\r\n"
            b"hello"
        )

    def test_file_response_without_body_keeps_length(self):
        response = file_response(b"hello", "text/plain", include_body=False)

        assert response.to_bytes() == (
            b"HTTP/1.1 200 OK\r\n"
            b"Content-Type: text/plain\r\n"
            b"Content-Length: 5\r\n"
            b"Connection: close\r\n"
            b"\r\n"
        )

    def test_created(self):
        assert created().to_bytes() == (
            b"HTTP/1.1 201 Created\r\n"
            b"Content-Type: text/html\r\n"
            b"Content-Length: 0\r\n"
            b"Connection: close\r\n"
            b"\r\n"
        )

    def test_stored_ok(self):
        assert stored_ok().to_bytes() == (
            b"HTTP/1.1 200 OK\r\n"
            b"Content-Type: text/html\r\n"
            b"Content-Length: 0\r\n"
            b"Connection: close\r\n"
            b"\r\n"
        )

    def test_no_content(self):
        assert no_content().to_bytes() == (
            b"HTTP/1.1 204 No Content\r\n"
            b"Connection: close\r\n"
            b"\r\n"
        )

    def test_not_found(self):
        assert not_found().to_bytes() == (
            b"HTTP/1.1 404 Not Found\r\n"
            b"Content-Type: text/html\r\n"
            b"Content-Length: 22\r\n"
            b"Connection: close\r\n"
            b"\r\n"
            b"<h1>404 Not Found</h1>"
        )

    def test_method_not_allowed(self):
        assert method_not_allowed().to_bytes() == (
            b"HTTP/1.1 405 Method Not Allowed\r\n"
            b"Content-Type: text/html\r\n"
            b"Content-Length: 31\r\n"
            b"Connection: close\r\n"
            b"\r\n"
            b"<h1>405 Method Not Allowed</h1>"
        )

    def test_fixed_responses_are_fresh_objects(self):
        first = not_found()
        first.set_header("X-Extra", "1")

        assert "X-Extra" not in not_found().headers
