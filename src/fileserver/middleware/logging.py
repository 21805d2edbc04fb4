"""
=============================================================================
ACCESS LOGGING MIDDLEWARE
=============================================================================

Writes one access log line per request on the "fileserver.access" logger:

    127.0.0.1 - - [19/Oct/2026:10:00:00 +0000] "PUT /a.txt HTTP/1.1" 200 0 1.42ms

or, with log_format="json", one JSON object per line for log shippers.

The logger is namespaced so it can be routed separately:

    logging.getLogger("fileserver.access").addHandler(file_handler)

=============================================================================
"""

import json
import logging
import time
from dataclasses import asdict, dataclass
from typing import Optional

from .base import Middleware, NextHandler
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse


logger = logging.getLogger("fileserver.access")


@dataclass
class RequestLog:
    """Structured log entry for one request."""

    method: str
    resource: str
    version: str
    client_ip: str
    status_code: int
    content_length: int
    duration_ms: float
    timestamp: str

    def to_dict(self) -> dict:
        data = asdict(self)
        data["duration_ms"] = round(self.duration_ms, 2)
        return data

    def to_text(self) -> str:
        """Apache-like common log line."""
        request_line = " ".join(p for p in (self.method, self.resource, self.version) if p)
        return (
            f'{self.client_ip or "-"} - - [{self.timestamp}] '
            f'"{request_line}" {self.status_code} '
            f'{self.content_length} {self.duration_ms:.2f}ms'
        )


class LoggingMiddleware(Middleware):
    """
    Request logging middleware.

    Should be the first middleware added so its timing covers the whole
    request. It never modifies the response.
    """

    def __init__(self, log_format: str = "text", log_level: int = logging.INFO):
        """
        Args:
            log_format: "text" (human readable) or "json".
            log_level: Level used for access lines.
        """
        self.log_format = log_format
        self.log_level = log_level

    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        start_time = time.time()

        try:
            response = next(request)
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.error(
                f"Request failed: {request.method} {request.resource} "
                f"- {type(e).__name__}: {e} ({duration_ms:.2f}ms)"
            )
            raise

        duration_ms = (time.time() - start_time) * 1000

        log_entry = RequestLog(
            method=request.method,
            resource=request.resource,
            version=request.version,
            client_ip=request.client_address[0],
            status_code=int(response.status),
            content_length=len(response.body),
            duration_ms=duration_ms,
            timestamp=time.strftime("%d/%b/%Y:%H:%M:%S %z"),
        )

        if self.log_format == "json":
            logger.log(self.log_level, json.dumps(log_entry.to_dict()))
        else:
            logger.log(self.log_level, log_entry.to_text())

        return response
