"""
=============================================================================
MIDDLEWARE
=============================================================================

Middleware is code that runs BETWEEN the matcher picking a route and the
route handler running. Each layer wraps the next one:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   matcher.dispatch(request)                                          │
    │        │                                                             │
    │        ▼                                                             │
    │   ┌──────────────────┐                                               │
    │   │ LoggingMiddleware │ ──► times the request, logs one line         │
    │   └────────┬─────────┘                                               │
    │            ▼                                                         │
    │   ┌──────────────────┐                                               │
    │   │ auth (use_func)   │ ──► may return 401 without calling next      │
    │   └────────┬─────────┘                                               │
    │            ▼                                                         │
    │   ┌──────────────────┐                                               │
    │   │  route handler    │                                               │
    │   └──────────────────┘                                               │
    │                                                                      │
    │   The response flows back UP through the same layers.               │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The chain for a route is built once, when the route is registered, from
the router's middleware at that moment.

=============================================================================
"""

from .base import (
    Handler,
    Middleware,
    MiddlewareFunc,
    MiddlewareLike,
    MiddlewareStack,
    compose,
    middleware_name,
    same_middleware,
    use_func,
)
from .logging import LoggingMiddleware, RequestLog

__all__ = [
    # Chain building
    "compose",
    "use_func",
    "same_middleware",
    "middleware_name",

    # Types and containers
    "Handler",
    "Middleware",
    "MiddlewareFunc",
    "MiddlewareLike",
    "MiddlewareStack",

    # Built-in middleware
    "LoggingMiddleware",
    "RequestLog",
]
