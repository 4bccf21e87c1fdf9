"""
=============================================================================
ROUTER
=============================================================================

The Router ties a middleware stack to a matcher. It does no matching of
its own: registering a route wraps the handler in the router's CURRENT
middleware and hands the result to the matcher.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                         REGISTRATION                                │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   router.get("/items", list_items)                                  │
    │        │                                                             │
    │        ▼                                                             │
    │   compose([Logger, Auth], list_items)  ──►  Logger(Auth(list_items))│
    │        │                                                             │
    │        ▼                                                             │
    │   matcher.register("/items", <wrapped>, method="GET")  ──►  Route   │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
SNAPSHOT AT REGISTRATION
=============================================================================

The chain is frozen when the route is registered:

    router = Router(Logger)
    router.get("/a", a)          # Logger → a
    router.use(Auth)
    router.get("/b", b)          # Logger → Auth → b
                                 # "/a" still runs Logger only

=============================================================================
DERIVED ROUTERS
=============================================================================

Every derived router gets its OWN copy of the middleware list:

    group("/api", Auth)          new prefix, parent list + [Auth]
    group("/public", inherit=False)
                                 new prefix, empty list
    with_middleware(Cache)       same prefix, parent list + [Cache]
    skip(Auth)                   same prefix, parent list without Auth

    router.with_middleware(Cache).get("/report", report)
    # Cache applies to /report only; `router` is untouched

=============================================================================
"""

from typing import Any, Callable, Optional, List
import logging

from .config import RouterConfig
from .http.matcher import Matcher, Route
from .http.request import HTTPRequest
from .http.response import HTTPResponse
from .middleware.base import (
    Handler,
    MiddlewareFunc,
    MiddlewareLike,
    MiddlewareStack,
    middleware_name,
    use_func,
)


logger = logging.getLogger(__name__)


class Router:
    """
    Route registration with ordered, scoped middleware.

    Usage:
        router = Router(LoggingMiddleware())

        @router.get("/health")
        def health(request):
            return ok({"status": "up"})

        api = router.group("/api", require_token)
        api.get("/items", list_items)                # Logging → token → list_items
        api.skip(require_token).get("/ping", ping)   # Logging → ping

        response = router.dispatch(request)
    """

    def __init__(
        self,
        *middleware: MiddlewareLike,
        matcher: Optional[Matcher] = None,
        config: Optional[RouterConfig] = None,
    ):
        """
        Args:
            *middleware: Initial middleware, outermost first
            matcher: Matcher to register into; a root Matcher built from
                     `config` when omitted
            config: Router settings (validated here)
        """
        self.config = config or RouterConfig()
        self.config.validate()

        if matcher is None:
            matcher = Matcher(
                strict_slashes=self.config.strict_slashes,
                catch_errors=self.config.catch_errors,
            )
        self.matcher = matcher
        self._stack = MiddlewareStack(middleware)

    def _derive(self, matcher: Matcher, stack: MiddlewareStack) -> "Router":
        # Keep whatever a subclass set up in __init__
        router = self.__class__.__new__(self.__class__)
        router.__dict__.update(self.__dict__)
        router.matcher = matcher
        router._stack = stack
        return router

    @property
    def middleware(self) -> tuple:
        """Snapshot of the current middleware, outermost first."""
        return tuple(self._stack)

    # =========================================================================
    # ROUTE REGISTRATION
    # =========================================================================

    def handle(
        self,
        pattern: str,
        handler: Handler,
        method: Optional[str] = None,
        name: Optional[str] = None,
        **meta: Any
    ) -> Route:
        """
        Register a handler, wrapped in the current middleware.

        Args:
            pattern: URL pattern relative to this router's prefix
            handler: Terminal handler
            method: HTTP method filter (None for any method)
            name: Optional route name for url_for()
            **meta: Extra metadata stored on the Route

        Returns:
            The matcher's Route

        Raises:
            TypeError: If handler is not callable or a middleware misbehaves
        """
        wrapped = self._stack.wrap(handler)
        route = self.matcher.register(pattern, wrapped, method=method, name=name, **meta)
        logger.debug(
            f"Registered {route.method or 'ANY'} {route.path} "
            f"with {len(self._stack)} middleware"
        )
        return route

    def route(
        self,
        pattern: str,
        method: Optional[str] = None,
        name: Optional[str] = None,
        **meta: Any
    ) -> Callable[[Handler], Handler]:
        """
        Decorator form of handle(). Returns the function unchanged.

            @router.route("/items", method="GET")
            def list_items(request):
                ...
        """
        def decorator(handler: Handler) -> Handler:
            self.handle(pattern, handler, method, name, **meta)
            return handler
        return decorator

    def _method_route(self, method, pattern, handler, name, meta):
        if handler is None:
            return self.route(pattern, method, name, **meta)
        return self.handle(pattern, handler, method, name, **meta)

    # Each of these registers immediately when given a handler and returns
    # the Route; without one it returns a decorator:
    #
    #     router.get("/items", list_items)
    #
    #     @router.get("/items")
    #     def list_items(request): ...

    def get(self, pattern: str, handler: Optional[Handler] = None, name: Optional[str] = None, **meta: Any):
        """Register a GET route."""
        return self._method_route("GET", pattern, handler, name, meta)

    def post(self, pattern: str, handler: Optional[Handler] = None, name: Optional[str] = None, **meta: Any):
        """Register a POST route."""
        return self._method_route("POST", pattern, handler, name, meta)

    def put(self, pattern: str, handler: Optional[Handler] = None, name: Optional[str] = None, **meta: Any):
        """Register a PUT route."""
        return self._method_route("PUT", pattern, handler, name, meta)

    def patch(self, pattern: str, handler: Optional[Handler] = None, name: Optional[str] = None, **meta: Any):
        """Register a PATCH route."""
        return self._method_route("PATCH", pattern, handler, name, meta)

    def delete(self, pattern: str, handler: Optional[Handler] = None, name: Optional[str] = None, **meta: Any):
        """Register a DELETE route."""
        return self._method_route("DELETE", pattern, handler, name, meta)

    def head(self, pattern: str, handler: Optional[Handler] = None, name: Optional[str] = None, **meta: Any):
        """Register a HEAD route."""
        return self._method_route("HEAD", pattern, handler, name, meta)

    def options(self, pattern: str, handler: Optional[Handler] = None, name: Optional[str] = None, **meta: Any):
        """Register an OPTIONS route."""
        return self._method_route("OPTIONS", pattern, handler, name, meta)

    # =========================================================================
    # MIDDLEWARE
    # =========================================================================

    def use(self, *middleware: MiddlewareLike) -> "Router":
        """
        Append middleware to this router, in place.

        Only routes registered after this call see it.

        Raises:
            TypeError: If any middleware is not callable
        """
        self._stack.use(*middleware)
        return self

    def use_func(self, *funcs: MiddlewareFunc) -> "Router":
        """Append (next, request) functions as middleware."""
        return self.use(*[use_func(func) for func in funcs])

    def group(self, prefix: str, *middleware: MiddlewareLike, inherit: bool = True) -> "Router":
        """
        Create a router for routes under `prefix`.

        The new router registers into a sub-matcher of this one and starts
        with this router's middleware followed by `middleware`.

        Args:
            prefix: Path prefix for the group
            *middleware: Extra middleware for the group only
            inherit: False starts the group from `middleware` alone,
                     dropping everything inherited from this router

        A single None (group("/p", None)) is shorthand for
        inherit=False with no extra middleware. None mixed with real
        middleware is rejected with TypeError.

        Returns:
            The new Router
        """
        if len(middleware) == 1 and middleware[0] is None:
            middleware = ()
            inherit = False

        stack = self._stack.extend(*middleware) if inherit else MiddlewareStack(middleware)
        sub = self._derive(self.matcher.subrouter(prefix), stack)
        logger.debug(
            f"Group {sub.matcher.prefix or '/'}: "
            f"{'inherited' if inherit else 'reset'} middleware, {len(stack)} total"
        )
        return sub

    def with_middleware(self, *middleware: MiddlewareLike) -> "Router":
        """
        Create a router on the same mount point with extra middleware.

            router.with_middleware(audit).delete("/items/:id", delete_item)

        `audit` wraps delete_item only; this router is not modified.
        """
        return self._derive(self.matcher, self._stack.extend(*middleware))

    def with_func(self, *funcs: MiddlewareFunc) -> "Router":
        """with_middleware() for (next, request) functions."""
        return self.with_middleware(*[use_func(func) for func in funcs])

    def skip(self, *middleware: MiddlewareLike) -> "Router":
        """
        Create a router on the same mount point without some middleware.

            router.use(auth)
            router.skip(auth).get("/info", info)    # auth does not run

        Entries are removed by identity (every occurrence). A different
        middleware object built from the same logic is kept.
        """
        stack = self._stack.without(*middleware)
        logger.debug(
            f"Skip {', '.join(middleware_name(mw) for mw in middleware)}: "
            f"{len(self._stack) - len(stack)} removed"
        )
        return self._derive(self.matcher, stack)

    def skip_func(self, *funcs: MiddlewareFunc) -> "Router":
        """skip() for middleware added with use_func() or Router.use_func()."""
        return self._derive(self.matcher, self._stack.without_funcs(*funcs))

    # =========================================================================
    # SERVING
    # =========================================================================

    def dispatch(self, request: HTTPRequest) -> HTTPResponse:
        """Hand the request to the matcher."""
        return self.matcher.dispatch(request)

    # A Router is itself a handler, so it can be mounted or wrapped
    __call__ = dispatch

    def url_for(self, name: str, **params: str) -> Optional[str]:
        """Reverse-route a named route (None if unknown)."""
        return self.matcher.url_for(name, **params)

    def routes(self) -> List[Route]:
        """Every registered route, in registration order."""
        return self.matcher.routes()
