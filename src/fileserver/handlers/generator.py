"""
=============================================================================
RESPONSE GENERATOR
=============================================================================

Turns a parsed request into a filesystem operation and the response that
describes its outcome.

    ┌──────────┬───────────────────────────────┬───────────────────────────┐
    │ Method   │ Action                        │ Response                  │
    ├──────────┼───────────────────────────────┼───────────────────────────┤
    │ GET      │ read file (dir → index.html)  │ 200 + body  │ 404         │
    │ HEAD     │ same as GET                   │ 200 no body │ 404         │
    │ POST     │ create-or-truncate            │ 201                       │
    │ PUT      │ create-or-truncate            │ 200                       │
    │ DELETE   │ delete regular file           │ 204         │ 404         │
    │ other    │ nothing                       │ 405                       │
    └──────────┴───────────────────────────────┴───────────────────────────┘

POST and PUT store the body the same way and only differ in status code.
POST is not append-only or create-only here: posting to an existing path
replaces the file.

Filesystem errors (permission denied, a directory where a file should be,
disk full) are not turned into responses. They propagate as OSError and
the connection is dropped.

=============================================================================
"""

import logging
from pathlib import Path
from typing import Mapping, Optional

from ..core.file_store import FileStore, INDEX_FILE
from ..http.mime_types import get_mime_type
from ..http.request import HTTPRequest
from ..http.response import (
    HTTPResponse,
    created,
    file_response,
    method_not_allowed,
    no_content,
    not_found,
    stored_ok,
)


logger = logging.getLogger(__name__)


class ResponseGenerator:
    """
    Executes the method-specific action for a request.

    Stateless apart from its collaborators, so one instance serves every
    worker thread.

    Usage:
        generator = ResponseGenerator(FileStore("./www"))
        response = generator.generate(request)
        conn.send_response(response.to_bytes())
    """

    def __init__(self, store: FileStore, mime_types: Optional[Mapping[str, str]] = None):
        """
        Args:
            store: Access controller for the document root.
            mime_types: Extension table; the built-in table when None.
        """
        self.store = store
        self.mime_types = mime_types

        self._dispatch = {
            "GET": self._get,
            "HEAD": self._head,
            "POST": self._post,
            "PUT": self._put,
            "DELETE": self._delete,
        }

    def generate(self, request: HTTPRequest) -> HTTPResponse:
        """
        Compute the response for ``request``.

        Method tokens are matched case-sensitively; "get" is a 405.

        Raises:
            OSError: The filesystem operation failed.
        """
        action = self._dispatch.get(request.method)
        if action is None:
            return method_not_allowed()

        path = self.store.resolve(request.resource)
        logger.debug(f"{request.method} {request.resource} -> {path}")
        return action(request, path)

    # =========================================================================
    # READ METHODS
    # =========================================================================

    def _get(self, request: HTTPRequest, path: Path) -> HTTPResponse:
        return self._serve(path, include_body=True)

    def _head(self, request: HTTPRequest, path: Path) -> HTTPResponse:
        return self._serve(path, include_body=False)

    def _serve(self, path: Path, include_body: bool) -> HTTPResponse:
        if self.store.is_dir(path):
            path = path / INDEX_FILE

        if not self.store.is_file(path):
            return not_found()

        content = self.store.read(path)
        content_type = get_mime_type(str(path), self.mime_types)
        return file_response(content, content_type, include_body=include_body)

    # =========================================================================
    # WRITE METHODS
    # =========================================================================

    def _post(self, request: HTTPRequest, path: Path) -> HTTPResponse:
        self.store.store(path, request.body)
        return created()

    def _put(self, request: HTTPRequest, path: Path) -> HTTPResponse:
        self.store.store(path, request.body)
        return stored_ok()

    def _delete(self, request: HTTPRequest, path: Path) -> HTTPResponse:
        if self.store.remove(path):
            return no_content()
        return not_found()
