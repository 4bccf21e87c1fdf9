"""
HTTP value types and the bundled route matcher.

    request.py   HTTPRequest, the value every layer receives
    response.py  HTTPResponse, ResponseBuilder and one-line helpers
    matcher.py   Matcher, the regex route table the Router registers into
"""

from http import HTTPStatus

from .request import HTTPRequest
from .response import (
    HTTPResponse,
    ResponseBuilder,
    ok,
    created,
    no_content,
    bad_request,
    unauthorized,
    forbidden,
    not_found,
    method_not_allowed,
    internal_error,
)
from .matcher import ALL_METHODS, Matcher, Route, RouteMatch, RouteError

__all__ = [
    # Request / response values
    "HTTPRequest",
    "HTTPResponse",
    "ResponseBuilder",
    "HTTPStatus",

    # Response helpers
    "ok",
    "created",
    "no_content",
    "bad_request",
    "unauthorized",
    "forbidden",
    "not_found",
    "method_not_allowed",
    "internal_error",

    # Matching
    "Matcher",
    "Route",
    "RouteMatch",
    "RouteError",
    "ALL_METHODS",
]
