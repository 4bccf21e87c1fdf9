"""
=============================================================================
HTTP RESPONSE
=============================================================================

What every handler returns and every middleware layer may inspect or
decorate on the way back out.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     RESPONSE ON THE WAY OUT                         │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   handler            innermost mw        outermost mw     transport  │
    │   return ok("hi") ──► set_header(...) ──► set_header(...) ──► (out)  │
    │                                                                      │
    │   HTTPResponse(status=200, headers={...}, body=b"hi")               │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Serializing the response to bytes belongs to whatever serves it; this
module only holds and builds the value.

=============================================================================
BUILDER
=============================================================================

    response = (ResponseBuilder()
        .status(HTTPStatus.CREATED)
        .json({"id": 7})
        .header("Location", "/items/7")
        .build())

Each method returns `self` except build().

=============================================================================
"""

from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Optional, Dict, Any, Union
import json


@dataclass
class HTTPResponse:
    """
    Represents an HTTP response produced by a handler.

    Use ResponseBuilder (or the helpers at the bottom of this module)
    for a more convenient way to construct one.
    """

    status: HTTPStatus = HTTPStatus.OK
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    version: str = "HTTP/1.1"

    @property
    def status_line(self) -> str:
        """
        Get the HTTP status line, e.g. "HTTP/1.1 200 OK".
        """
        return f"{self.version} {int(self.status)} {self.status.phrase}"

    @property
    def text(self) -> str:
        """The body decoded as UTF-8."""
        return self.body.decode("utf-8")

    def set_header(self, name: str, value: str) -> "HTTPResponse":
        """
        Set a response header.

        Returns self for method chaining:
            response.set_header("X-One", "1").set_header("X-Two", "2")
        """
        self.headers[name] = value
        return self

    def set_body(self, body: Union[str, bytes]) -> "HTTPResponse":
        """Set the response body, encoding strings to UTF-8."""
        if isinstance(body, str):
            self.body = body.encode("utf-8")
        else:
            self.body = body
        return self


class ResponseBuilder:
    """
    Fluent builder for constructing HTTP responses.

    Usage:
        ResponseBuilder().status(HTTPStatus.OK).json({"message": "Hello"}).build()
        ResponseBuilder().text("pong").header("Cache-Control", "no-store").build()
    """

    def __init__(self):
        self._status = HTTPStatus.OK
        self._headers: Dict[str, str] = {}
        self._body: bytes = b""

    def status(self, status: HTTPStatus) -> "ResponseBuilder":
        """Set the HTTP status code."""
        self._status = HTTPStatus(status)
        return self

    def header(self, name: str, value: str) -> "ResponseBuilder":
        """Add a single response header."""
        self._headers[name] = value
        return self

    def headers(self, headers: Dict[str, str]) -> "ResponseBuilder":
        """Add multiple headers at once."""
        self._headers.update(headers)
        return self

    def content_type(self, content_type: str) -> "ResponseBuilder":
        """Set the Content-Type header."""
        return self.header("Content-Type", content_type)

    def body(self, body: Union[str, bytes]) -> "ResponseBuilder":
        """
        Set the response body (raw bytes or string).

        For structured data, prefer json(), html(), or text().
        """
        if isinstance(body, str):
            self._body = body.encode("utf-8")
        else:
            self._body = body
        return self

    def text(self, text: str, content_type: str = "text/plain; charset=utf-8") -> "ResponseBuilder":
        """Set a plain text body."""
        self._body = text.encode("utf-8")
        self._headers["Content-Type"] = content_type
        return self

    def html(self, html: str) -> "ResponseBuilder":
        """Set an HTML body."""
        return self.text(html, "text/html; charset=utf-8")

    def json(self, data: Any, pretty: bool = False) -> "ResponseBuilder":
        """
        Set a JSON body.

        Args:
            data: Any JSON-serializable value
            pretty: Indent the output (handy while debugging)
        """
        indent = 2 if pretty else None
        self._body = json.dumps(data, indent=indent, default=str).encode("utf-8")
        self._headers["Content-Type"] = "application/json; charset=utf-8"
        return self

    def build(self) -> HTTPResponse:
        """Build the final HTTPResponse."""
        return HTTPResponse(
            status=self._status,
            headers=dict(self._headers),
            body=self._body,
        )


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================
#
# Quick one-liners for common responses. Error helpers return a small JSON
# document: {"error": "..."}.
#
#     return ok({"message": "Success"})
#     return not_found("User not found")
#
# =============================================================================

def ok(body: Union[str, bytes, dict, list] = "", content_type: Optional[str] = None) -> HTTPResponse:
    """
    Create a 200 OK response.

    The body type picks the encoding:
    - dict/list → JSON
    - str → text/plain (or content_type)
    - bytes → raw
    """
    builder = ResponseBuilder().status(HTTPStatus.OK)

    if isinstance(body, (dict, list)):
        builder.json(body)
    elif isinstance(body, str):
        builder.text(body, content_type or "text/plain; charset=utf-8")
    else:
        builder.body(body)
        if content_type:
            builder.content_type(content_type)

    return builder.build()


def created(body: Union[str, bytes, dict, list] = "", location: Optional[str] = None) -> HTTPResponse:
    """Create a 201 Created response, optionally with a Location header."""
    builder = ResponseBuilder().status(HTTPStatus.CREATED)

    if isinstance(body, (dict, list)):
        builder.json(body)
    elif body:
        builder.body(body)

    if location:
        builder.header("Location", location)

    return builder.build()


def no_content() -> HTTPResponse:
    """Create a 204 No Content response."""
    return ResponseBuilder().status(HTTPStatus.NO_CONTENT).build()


def bad_request(message: str = "Bad Request") -> HTTPResponse:
    """Create a 400 Bad Request response."""
    return ResponseBuilder().status(HTTPStatus.BAD_REQUEST).json({"error": message}).build()


def unauthorized(message: str = "Unauthorized") -> HTTPResponse:
    """
    Create a 401 Unauthorized response.

    401 means "not authenticated". For "authenticated but not
    permitted", use forbidden().
    """
    return (ResponseBuilder()
        .status(HTTPStatus.UNAUTHORIZED)
        .header("WWW-Authenticate", 'Bearer realm="api"')
        .json({"error": message})
        .build())


def forbidden(message: str = "Forbidden") -> HTTPResponse:
    """Create a 403 Forbidden response."""
    return ResponseBuilder().status(HTTPStatus.FORBIDDEN).json({"error": message}).build()


def not_found(message: str = "Not Found") -> HTTPResponse:
    """Create a 404 Not Found response."""
    return ResponseBuilder().status(HTTPStatus.NOT_FOUND).json({"error": message}).build()


def method_not_allowed(allowed_methods: list[str]) -> HTTPResponse:
    """
    Create a 405 Method Not Allowed response.

    Includes the Allow header listing valid methods (RFC 7231).
    """
    return (ResponseBuilder()
        .status(HTTPStatus.METHOD_NOT_ALLOWED)
        .header("Allow", ", ".join(allowed_methods))
        .json({"error": "Method Not Allowed", "allowed": allowed_methods})
        .build())


def internal_error(message: str = "Internal Server Error") -> HTTPResponse:
    """
    Create a 500 Internal Server Error response.

    Keep the message generic; details belong in the log, not the body.
    """
    return ResponseBuilder().status(HTTPStatus.INTERNAL_SERVER_ERROR).json({"error": message}).build()
