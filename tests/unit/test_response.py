"""
Unit tests for HTTP response building.
"""

import json

from muxchain.http import (
    HTTPResponse,
    HTTPStatus,
    ResponseBuilder,
    bad_request,
    created,
    forbidden,
    internal_error,
    method_not_allowed,
    no_content,
    not_found,
    ok,
    unauthorized,
)


class TestHTTPResponse:
    """Tests for HTTPResponse class."""

    def test_status_line(self):
        """Test status line generation."""
        response = HTTPResponse(status=HTTPStatus.OK)
        assert response.status_line == "HTTP/1.1 200 OK"

        response = HTTPResponse(status=HTTPStatus.NOT_FOUND)
        assert response.status_line == "HTTP/1.1 404 Not Found"

    def test_defaults(self):
        """A bare response is an empty 200."""
        response = HTTPResponse()

        assert response.status == HTTPStatus.OK
        assert response.headers == {}
        assert response.body == b""

    def test_set_header_chaining(self):
        """Test method chaining for headers."""
        response = (HTTPResponse()
            .set_header("X-One", "1")
            .set_header("X-Two", "2"))

        assert response.headers["X-One"] == "1"
        assert response.headers["X-Two"] == "2"

    def test_set_body_and_text(self):
        """Strings are encoded; text decodes."""
        response = HTTPResponse().set_body("héllo")

        assert response.body == "héllo".encode("utf-8")
        assert response.text == "héllo"


class TestResponseBuilder:
    """Tests for ResponseBuilder class."""

    def test_status(self):
        """Test setting status code."""
        response = ResponseBuilder().status(HTTPStatus.CREATED).build()
        assert response.status == HTTPStatus.CREATED

    def test_status_from_int(self):
        """Plain integers become HTTPStatus members."""
        response = ResponseBuilder().status(418).build()
        assert response.status is HTTPStatus.IM_A_TEAPOT

    def test_json_body(self):
        """Test JSON body encoding."""
        data = {"name": "John", "age": 30}
        response = ResponseBuilder().json(data).build()

        assert response.headers["Content-Type"] == "application/json; charset=utf-8"
        assert json.loads(response.body) == data

    def test_html_body(self):
        """Test HTML body."""
        html = "<html><body>Hello</body></html>"
        response = ResponseBuilder().html(html).build()

        assert response.headers["Content-Type"] == "text/html; charset=utf-8"
        assert response.body == html.encode()

    def test_text_body(self):
        """Test plain text body."""
        text = "Hello, World!"
        response = ResponseBuilder().text(text).build()

        assert response.headers["Content-Type"] == "text/plain; charset=utf-8"
        assert response.body == text.encode()

    def test_build_copies_headers(self):
        """Two builds from one builder do not share headers."""
        builder = ResponseBuilder().header("X-A", "1")
        first = builder.build()
        second = builder.build()

        first.set_header("X-B", "2")
        assert "X-B" not in second.headers

    def test_method_chaining(self):
        """Test fluent API chaining."""
        response = (ResponseBuilder()
            .status(HTTPStatus.OK)
            .header("X-Custom", "value")
            .json({"key": "value"})
            .build())

        assert response.status == HTTPStatus.OK
        assert response.headers["X-Custom"] == "value"
        assert b'"key"' in response.body


class TestConvenienceFunctions:
    """Tests for convenience response functions."""

    def test_ok(self):
        """Test ok() function."""
        response = ok("Hello")
        assert response.status == HTTPStatus.OK
        assert response.body == b"Hello"

        response = ok({"msg": "hello"})
        assert json.loads(response.body) == {"msg": "hello"}

    def test_ok_bytes(self):
        """Bytes are sent as-is with an optional content type."""
        response = ok(b"\x00\x01", content_type="application/octet-stream")

        assert response.body == b"\x00\x01"
        assert response.headers["Content-Type"] == "application/octet-stream"

    def test_created(self):
        """Test created() function."""
        response = created({"id": 123}, location="/items/123")
        assert response.status == HTTPStatus.CREATED
        assert response.headers["Location"] == "/items/123"

    def test_no_content(self):
        """Test no_content() function."""
        response = no_content()
        assert response.status == HTTPStatus.NO_CONTENT
        assert response.body == b""

    def test_not_found(self):
        """Test not_found() function."""
        response = not_found("Resource not found")
        assert response.status == HTTPStatus.NOT_FOUND
        assert json.loads(response.body) == {"error": "Resource not found"}

    def test_bad_request(self):
        """Test bad_request() function."""
        response = bad_request("Invalid input")
        assert response.status == HTTPStatus.BAD_REQUEST
        assert b"Invalid input" in response.body

    def test_unauthorized(self):
        """Test unauthorized() function."""
        response = unauthorized()
        assert response.status == HTTPStatus.UNAUTHORIZED
        assert response.headers["WWW-Authenticate"] == 'Bearer realm="api"'

    def test_forbidden(self):
        """Test forbidden() function."""
        assert forbidden().status == HTTPStatus.FORBIDDEN

    def test_method_not_allowed(self):
        """Test method_not_allowed() function."""
        response = method_not_allowed(["GET", "POST"])

        assert response.status == HTTPStatus.METHOD_NOT_ALLOWED
        assert response.headers["Allow"] == "GET, POST"

    def test_internal_error(self):
        """Test internal_error() function."""
        response = internal_error()
        assert response.status == HTTPStatus.INTERNAL_SERVER_ERROR
        assert json.loads(response.body) == {"error": "Internal Server Error"}
