"""
=============================================================================
EXAMPLE: SCOPED MIDDLEWARE
=============================================================================

Builds a small app with router-wide, group-only and route-only middleware,
then pushes a few requests through it in-process and prints what ran.

    python examples/basic.py
    MUXCHAIN_LOG_LEVEL=DEBUG python examples/basic.py   # show registrations

Serving over a socket is up to whatever hosts the router; anything that
can turn a request into an HTTPRequest can call router.dispatch().

=============================================================================
"""

import logging

from muxchain import (
    HTTPRequest,
    LoggingMiddleware,
    Router,
    RouterConfig,
    ok,
    unauthorized,
)


logger = logging.getLogger("example")


def announce(next, request):
    logger.info("In announce middleware")
    response = next(request)
    logger.info("After next")
    return response


def api_only(next, request):
    logger.info("api only")
    return next(request)


def require_token(next, request):
    if request.get_header("Authorization") != "Bearer secret":
        return unauthorized("Missing or invalid token")
    request.set("user", "alice")
    return next(request)


def build_app(config: RouterConfig) -> Router:
    router = Router(LoggingMiddleware(log_format=config.log_format), config=config)
    router.use_func(announce)

    # Fresh group: none of the router's middleware applies below /api
    api = router.group("/api", None)
    api.use_func(api_only)

    @api.get("/foo")
    def foo(request):
        return ok("foo")

    # Middleware for this one route only
    router.with_func(require_token).get(
        "/base/:name",
        lambda request: ok(f"Hello, {request.param('name')} (as {request.get('user')})"),
    )

    # Only the access log
    router.skip_func(announce).get("/health", lambda request: ok({"status": "up"}))

    return router


def main() -> None:
    config = RouterConfig.from_env()
    config.setup_logging()

    router = build_app(config)

    requests = [
        HTTPRequest.from_target("GET", "/api/foo"),
        HTTPRequest.from_target("GET", "/base/gopher"),
        HTTPRequest.from_target("GET", "/base/gopher", headers={"Authorization": "Bearer secret"}),
        HTTPRequest.from_target("GET", "/health"),
        HTTPRequest.from_target("POST", "/health"),
    ]

    for request in requests:
        response = router.dispatch(request)
        print(f"{request.method} {request.path} -> {response.status_line}: {response.text}")


if __name__ == "__main__":
    main()
