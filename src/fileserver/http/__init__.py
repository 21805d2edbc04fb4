"""
=============================================================================
HTTP PROTOCOL COMPONENTS
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        HTTP MODULE                                   │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │  request.py       Line stream → HTTPRequest                         │
    │  response.py      HTTPResponse → bytes, fixed 2xx/404/405 replies   │
    │  status_codes.py  The five status codes this server emits           │
    │  mime_types.py    File extension → Content-Type                     │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .request import HTTPRequest, RequestParser, HTTPParseError, parse_request
from .response import (
    HTTPResponse,
    ResponseBuilder,
    file_response,       # 200 OK (GET/HEAD)
    created,             # 201 Created (POST)
    stored_ok,           # 200 OK (PUT)
    no_content,          # 204 No Content (DELETE)
    not_found,           # 404 Not Found
    method_not_allowed,  # 405 Method Not Allowed
)
from .status_codes import HTTPStatus
from .mime_types import get_mime_type, MIME_TYPES, DEFAULT_MIME_TYPE

__all__ = [
    # Request parsing
    "HTTPRequest",
    "RequestParser",
    "HTTPParseError",
    "parse_request",

    # Response building
    "HTTPResponse",
    "ResponseBuilder",
    "file_response",
    "created",
    "stored_ok",
    "no_content",
    "not_found",
    "method_not_allowed",

    # Status codes
    "HTTPStatus",

    # MIME types
    "get_mime_type",
    "MIME_TYPES",
    "DEFAULT_MIME_TYPE",
]
