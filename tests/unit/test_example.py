"""
Tests for the scoped-middleware example app.
"""

import importlib.util
import logging
from pathlib import Path

import pytest

from muxchain import HTTPRequest, HTTPStatus, RouterConfig


EXAMPLE = Path(__file__).parent.parent.parent / "examples" / "basic.py"


@pytest.fixture
def app():
    """The example router, built with default settings."""
    spec = importlib.util.spec_from_file_location("basic_example", EXAMPLE)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module.build_app(RouterConfig())


class TestExampleApp:
    """Tests for examples/basic.py."""

    def test_health_runs_only_access_log(self, app, caplog):
        """/health skips announce; the access log still runs."""
        with caplog.at_level(logging.INFO):
            response = app.dispatch(HTTPRequest.from_target("GET", "/health"))

        assert response.status == HTTPStatus.OK
        assert "In announce middleware" not in caplog.text
        assert '"GET /health" 200' in caplog.text

    def test_api_group_is_reset(self, app, caplog):
        """/api/foo runs api_only but neither announce nor the access log."""
        with caplog.at_level(logging.INFO):
            response = app.dispatch(HTTPRequest.from_target("GET", "/api/foo"))

        assert response.text == "foo"
        assert "api only" in caplog.text
        assert "In announce middleware" not in caplog.text
        assert "X-Request-ID" not in response.headers

    def test_token_route(self, app):
        """/base/:name needs the bearer token."""
        assert app.dispatch(HTTPRequest.from_target("GET", "/base/gopher")).status == HTTPStatus.UNAUTHORIZED

        authed = HTTPRequest.from_target("GET", "/base/gopher", headers={"Authorization": "Bearer secret"})
        assert app.dispatch(authed).text == "Hello, gopher (as alice)"
