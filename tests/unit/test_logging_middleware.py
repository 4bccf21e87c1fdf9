"""
Unit tests for the access logging middleware.
"""

import json
import logging

import pytest

from muxchain import Router
from muxchain.http import HTTPRequest, HTTPStatus, ok, unauthorized
from muxchain.middleware import LoggingMiddleware, RequestLog, compose


ACCESS_LOGGER = "muxchain.access"


def make_request(method: str, target: str, **kwargs) -> HTTPRequest:
    """Helper to create a request for testing."""
    return HTTPRequest.from_target(method, target, **kwargs)


def hello(request: HTTPRequest):
    return ok("hello")


class TestLoggingMiddleware:
    """Tests for LoggingMiddleware."""

    def test_text_line(self, caplog):
        """One text line per request with method, path and status."""
        handler = compose([LoggingMiddleware()], hello)

        with caplog.at_level(logging.INFO, logger=ACCESS_LOGGER):
            handler(make_request("GET", "/greet", client_address=("127.0.0.1", 4000)))

        assert len(caplog.records) == 1
        message = caplog.records[0].getMessage()
        assert message.startswith("127.0.0.1 - - [")
        assert '"GET /greet" 200 5 ' in message

    def test_json_line(self, caplog):
        """JSON format logs a parseable document."""
        handler = compose([LoggingMiddleware(log_format="json")], hello)

        with caplog.at_level(logging.INFO, logger=ACCESS_LOGGER):
            handler(make_request("GET", "/greet?a=1&a=2", headers={"User-Agent": "pytest"}))

        entry = json.loads(caplog.records[0].getMessage())
        assert entry["method"] == "GET"
        assert entry["path"] == "/greet"
        assert entry["query"] == "a=1&a=2"
        assert entry["status_code"] == 200
        assert entry["user_agent"] == "pytest"
        assert entry["content_length"] == 5

    def test_request_id_generated(self):
        """A fresh id goes on the request and the response."""
        seen = {}

        def capture(request):
            seen["id"] = request.get("request_id")
            return ok("x")

        response = compose([LoggingMiddleware()], capture)(make_request("GET", "/"))

        assert len(seen["id"]) == 8
        assert response.headers["X-Request-ID"] == seen["id"]

    def test_request_id_honoured(self):
        """An incoming X-Request-ID is reused."""
        handler = compose([LoggingMiddleware()], hello)
        response = handler(make_request("GET", "/", headers={"X-Request-ID": "abc123"}))

        assert response.headers["X-Request-ID"] == "abc123"

    def test_request_id_header_optional(self):
        """include_request_id=False leaves the response headers alone."""
        handler = compose([LoggingMiddleware(include_request_id=False)], hello)
        response = handler(make_request("GET", "/"))

        assert "X-Request-ID" not in response.headers

    def test_skip_paths(self, caplog):
        """Skipped paths are served but not logged."""
        handler = compose([LoggingMiddleware(skip_paths=["/health"])], hello)

        with caplog.at_level(logging.INFO, logger=ACCESS_LOGGER):
            response = handler(make_request("GET", "/health"))

        assert response.status == HTTPStatus.OK
        assert caplog.records == []

    def test_custom_level(self, caplog):
        """Lines are emitted at the configured level."""
        handler = compose([LoggingMiddleware(log_level=logging.DEBUG)], hello)

        with caplog.at_level(logging.DEBUG, logger=ACCESS_LOGGER):
            handler(make_request("GET", "/"))

        assert caplog.records[0].levelno == logging.DEBUG

    def test_error_logged_and_reraised(self, caplog):
        """A failing handler is logged at ERROR and the exception propagates."""
        def boom(request):
            raise RuntimeError("kaboom")

        handler = compose([LoggingMiddleware()], boom)

        with caplog.at_level(logging.INFO, logger=ACCESS_LOGGER):
            with pytest.raises(RuntimeError):
                handler(make_request("POST", "/boom"))

        assert caplog.records[0].levelno == logging.ERROR
        assert "Request failed: POST /boom - RuntimeError: kaboom" in caplog.text

    def test_logs_inner_rejections(self, caplog):
        """As the outermost layer it sees responses from inner middleware."""
        def deny(next, request):
            return unauthorized()

        router = Router(LoggingMiddleware())
        router.use_func(deny)
        router.get("/private", hello)

        with caplog.at_level(logging.INFO, logger=ACCESS_LOGGER):
            router.dispatch(make_request("GET", "/private"))

        assert '"GET /private" 401' in caplog.text

    def test_invalid_format(self):
        """Unknown formats fail at construction."""
        with pytest.raises(ValueError):
            LoggingMiddleware(log_format="xml")


class TestRequestLog:
    """Tests for RequestLog."""

    def test_to_dict_rounds_duration(self):
        """duration_ms is rounded to two decimals."""
        entry = RequestLog(
            request_id="r1", method="GET", path="/", query="", client_ip="",
            user_agent="-", status_code=200, content_length=0,
            duration_ms=1.23456, timestamp="now",
        )

        assert entry.to_dict()["duration_ms"] == 1.23
        assert entry.to_text() == '- - - [now] "GET /" 200 0 1.23ms'
