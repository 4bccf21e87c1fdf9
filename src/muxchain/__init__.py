"""
=============================================================================
MUXCHAIN - Ordered Middleware Chaining on Top of a Path Router
=============================================================================

A small routing helper: register handlers, wrap them in middleware, group
routes under prefixes, and decide per group or per route which middleware
applies.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        MUXCHAIN AT A GLANCE                         │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   1. CHAIN BUILDING                                                 │
    │      - compose([A, B, C], handler) → A(B(C(handler)))               │
    │      - use_func() adapts (next, request) functions                  │
    │                                                                      │
    │   2. ROUTER                                                          │
    │      - get/post/put/patch/delete/head/options registration          │
    │      - use():              extend in place                          │
    │      - group():            new prefix, inherit or reset             │
    │      - with_middleware():  one-off extra middleware                 │
    │      - skip():             one-off removal                          │
    │                                                                      │
    │   3. MATCHER                                                         │
    │      - :param and *wildcard patterns, 404/405 handling              │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    muxchain/
    ├── __init__.py          # This file - package exports
    ├── router.py            # Router: registration, group/with/skip
    ├── config.py            # RouterConfig dataclass
    ├── http/
    │   ├── request.py       # HTTPRequest
    │   ├── response.py      # HTTPResponse, ResponseBuilder, helpers
    │   └── matcher.py       # Matcher (regex route table)
    └── middleware/
        ├── base.py          # compose, use_func, Middleware, MiddlewareStack
        └── logging.py       # LoggingMiddleware (access log)

=============================================================================
QUICK START
=============================================================================

    from muxchain import Router, HTTPRequest, LoggingMiddleware, ok, unauthorized

    def require_token(next, request):
        if request.get_header("Authorization") != "Bearer secret":
            return unauthorized()
        return next(request)

    router = Router(LoggingMiddleware())

    api = router.group("/api")
    api.use_func(require_token)

    @api.get("/items")
    def list_items(request):
        return ok(["apple", "pear"])

    api.skip_func(require_token).get("/ping", lambda request: ok("pong"))

    response = router.dispatch(HTTPRequest.from_target("GET", "/api/ping"))

=============================================================================
"""

__version__ = "1.0.0"

from .config import RouterConfig
from .router import Router
from .http import (
    HTTPRequest,
    HTTPResponse,
    HTTPStatus,
    ResponseBuilder,
    Matcher,
    Route,
    RouteError,
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
from .middleware import (
    Middleware,
    MiddlewareStack,
    LoggingMiddleware,
    compose,
    use_func,
)

__all__ = [
    "Router",
    "RouterConfig",
    "Matcher",
    "Route",
    "RouteError",
    "HTTPRequest",
    "HTTPResponse",
    "HTTPStatus",
    "ResponseBuilder",
    "Middleware",
    "MiddlewareStack",
    "LoggingMiddleware",
    "compose",
    "use_func",
    "ok",
    "created",
    "no_content",
    "bad_request",
    "unauthorized",
    "forbidden",
    "not_found",
    "method_not_allowed",
    "internal_error",
    "__version__",
]
