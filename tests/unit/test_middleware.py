"""
Unit tests for the middleware pipeline and access logging.
"""

import json
import logging

import pytest

from fileserver.http.request import HTTPRequest
from fileserver.http.response import HTTPResponse, not_found
from fileserver.middleware import LoggingMiddleware, Middleware, MiddlewarePipeline
from fileserver.middleware.logging import RequestLog


class Tag(Middleware):
    def __init__(self, label, calls):
        self.label = label
        self.calls = calls

    def __call__(self, request, next):
        self.calls.append(self.label)
        return next(request)


class TestPipeline:

    def test_first_added_runs_first(self):
        calls = []
        pipeline = MiddlewarePipeline().add(Tag("outer", calls)).add(Tag("inner", calls))

        def handler(request):
            calls.append("handler")
            return HTTPResponse()

        pipeline.wrap(handler)(HTTPRequest())

        assert calls == ["outer", "inner", "handler"]

    def test_empty_pipeline_returns_handler(self):
        pipeline = MiddlewarePipeline()

        assert len(pipeline) == 0
        assert pipeline.wrap(not_found) is not_found

    def test_iter_and_name(self):
        mw = Tag("x", [])
        pipeline = MiddlewarePipeline().add(mw)

        assert list(pipeline) == [mw]
        assert mw.name == "Tag"


class TestLoggingMiddleware:

    @pytest.fixture
    def request_(self):
        return HTTPRequest(
            method="GET",
            resource="/missing",
            version="HTTP/1.1",
            client_address=("10.1.2.3", 5555),
        )

    def test_text_log(self, request_, caplog):
        middleware = LoggingMiddleware()

        with caplog.at_level(logging.INFO, logger="fileserver.access"):
            response = middleware(request_, lambda r: not_found())

        assert response.status == 404
        assert len(caplog.records) == 1
        message = caplog.records[0].getMessage()
        assert message.startswith("10.1.2.3 - - [")
        assert '"GET /missing HTTP/1.1" 404 22 ' in message

    def test_json_log(self, request_, caplog):
        middleware = LoggingMiddleware(log_format="json")

        with caplog.at_level(logging.INFO, logger="fileserver.access"):
            middleware(request_, lambda r: not_found())

        entry = json.loads(caplog.records[0].getMessage())
        assert entry["method"] == "GET"
        assert entry["status_code"] == 404
        assert entry["client_ip"] == "10.1.2.3"

    def test_response_is_not_modified(self, request_):
        original = not_found()

        response = LoggingMiddleware()(request_, lambda r: original)

        assert response is original
        assert response.to_bytes() == not_found().to_bytes()

    def test_errors_are_logged_and_reraised(self, request_, caplog):
        def failing(request):
            raise PermissionError("denied")

        with caplog.at_level(logging.ERROR, logger="fileserver.access"):
            with pytest.raises(PermissionError):
                LoggingMiddleware()(request_, failing)

        assert "Request failed: GET /missing" in caplog.text


def test_request_log_text_for_empty_request_line():
    entry = RequestLog(
        method="",
        resource="",
        version="",
        client_ip="",
        status_code=405,
        content_length=31,
        duration_ms=0.5,
        timestamp="19/Oct/2026:10:00:00 +0000",
    )

    assert entry.to_text() == '- - - [19/Oct/2026:10:00:00 +0000] "" 405 31 0.50ms'
