"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The file server emits exactly five status codes. Anything the client does
wrong beyond "unknown method" or "missing file" ends the connection without
a response, so there is no 400 or 500 here.

    ┌──────┬──────────────────────┬──────────────────────────────────────┐
    │ Code │ Phrase               │ Sent for                             │
    ├──────┼──────────────────────┼──────────────────────────────────────┤
    │ 200  │ OK                   │ GET/HEAD of a file, PUT              │
    │ 201  │ Created              │ POST                                 │
    │ 204  │ No Content           │ DELETE of an existing file           │
    │ 404  │ Not Found            │ GET/HEAD/DELETE of a missing file    │
    │ 405  │ Method Not Allowed   │ any other method token               │
    └──────┴──────────────────────┴──────────────────────────────────────┘

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes and reason phrases.

    IntEnum, so members compare equal to plain integers:

        >>> HTTPStatus.NOT_FOUND == 404
        True
        >>> HTTPStatus.NOT_FOUND.phrase
        'Not Found'
    """

    OK = 200
    CREATED = 201
    NO_CONTENT = 204
    NOT_FOUND = 404
    METHOD_NOT_ALLOWED = 405

    @property
    def phrase(self) -> str:
        """Reason phrase used in the status line."""
        return _STATUS_PHRASES[self]

    @property
    def is_success(self) -> bool:
        """Check if this is a 2xx (success) status code."""
        return 200 <= self < 300

    @property
    def is_error(self) -> bool:
        """Check if this is an error status code (4xx or 5xx)."""
        return self >= 400


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.CREATED: "Created",
    HTTPStatus.NO_CONTENT: "No Content",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.METHOD_NOT_ALLOWED: "Method Not Allowed",
}
