"""
=============================================================================
ROUTE MATCHER
=============================================================================

The path-pattern engine the Router registers its (already wrapped)
handlers with. The Router never looks at a pattern itself; it only calls
three operations on a matcher:

    register(pattern, handler, method)   → Route
    subrouter(prefix)                    → Matcher sharing the route table
    dispatch(request)                    → HTTPResponse

Any object offering those can be handed to Router(matcher=...). This one
is a plain regex route table.

=============================================================================
PATTERNS
=============================================================================

1. STATIC:     /users            matches /users only
2. PARAMETER:  /users/:id        matches /users/123 → {"id": "123"}
3. WILDCARD:   /static/*path     matches /static/css/a.css → {"path": "css/a.css"}
               must be the LAST segment
               /static and /static/ match too → {"path": ""}

Compiled once at registration:

    /users/:id/posts/:post_id
    ^/users/(?P<id>[^/]+)/posts/(?P<post_id>[^/]+)$

=============================================================================
SHARED ROUTE TABLE
=============================================================================

A sub-matcher is a view onto its parent's table with a longer prefix:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   root = Matcher()              prefix ""                            │
    │   api  = root.subrouter("/api") prefix "/api"                        │
    │   v1   = api.subrouter("/v1")   prefix "/api/v1"                     │
    │                                                                      │
    │   v1.register("/items", h)  ──►  table: GET /api/v1/items → h        │
    │                                                                      │
    │   root.dispatch(GET /api/v1/items)  → h   (root sees every route)    │
    │   api.dispatch(GET /api/v1/items)   → h   (under /api)               │
    │   v1.dispatch(GET /other)           → 404 (outside /api/v1)          │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Registration order is the table order: first registered, first matched.
Registering the same pattern twice is allowed; the earlier route wins.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Callable, Optional, Dict, Any, List
import logging
import re

from .request import HTTPRequest
from .response import HTTPResponse, not_found, method_not_allowed, internal_error


logger = logging.getLogger(__name__)


Handler = Callable[[HTTPRequest], HTTPResponse]

ALL_METHODS = ["GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS"]

_PARAM_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_SEGMENT_PARAM = re.compile(r"(?<=/)([:*])([A-Za-z0-9_]*)(?=/|$)")


class RouteError(ValueError):
    """
    Raised when a route cannot be registered.

    Examples: a wildcard that is not the last segment, a parameter name
    used twice in one pattern, a handler that is not callable.
    """

    def __init__(self, message: str, pattern: str = ""):
        super().__init__(message)
        self.pattern = pattern


@dataclass
class Route:
    """
    A registered route: the handle returned by Matcher.register().

        Route(
            path="/api/users/:id",   # full pattern, prefix included
            method="GET",            # None = any method
            handler=<wrapped>,       # handler with its middleware baked in
            name="get_user",         # for url_for()
        )
    """

    path: str
    method: Optional[str]
    handler: Handler
    name: Optional[str] = None
    meta: Dict[str, Any] = field(default_factory=dict)

    _pattern: Optional[re.Pattern] = field(default=None, repr=False)
    _param_names: List[str] = field(default_factory=list, repr=False)

    def accepts(self, method: str) -> bool:
        """Whether this route's method filter lets `method` through."""
        return self.method is None or self.method == method.upper()


@dataclass
class RouteMatch:
    """Result of a successful match: the route and its extracted params."""

    route: Route
    params: Dict[str, str]


class RouteTable:
    """
    The ordered list of routes shared by a matcher and all its sub-matchers.
    """

    def __init__(self):
        self.routes: List[Route] = []
        self.named: Dict[str, Route] = {}

    def add(self, route: Route) -> None:
        self.routes.append(route)
        if route.name:
            self.named[route.name] = route


class Matcher:
    """
    Regex-based path matcher with a prefix and a shared route table.

    Usage:
        matcher = Matcher()
        matcher.register("/users/:id", get_user, method="GET")
        api = matcher.subrouter("/api")
        api.register("/health", health)        # /api/health

        response = matcher.dispatch(request)
    """

    def __init__(
        self,
        prefix: str = "",
        strict_slashes: bool = False,
        catch_errors: bool = True,
        _table: Optional[RouteTable] = None,
    ):
        """
        Args:
            prefix: Path prefix prepended to every registered pattern
            strict_slashes: When False, "/users/" and "/users" are the same path
            catch_errors: Turn exceptions escaping a handler into a 500 response
        """
        self.prefix = prefix.rstrip("/")
        self.strict_slashes = strict_slashes
        self.catch_errors = catch_errors
        self._table = _table if _table is not None else RouteTable()

    # =========================================================================
    # REGISTRATION
    # =========================================================================

    def register(
        self,
        pattern: str,
        handler: Handler,
        method: Optional[str] = None,
        name: Optional[str] = None,
        **meta: Any
    ) -> Route:
        """
        Register a handler for a pattern under this matcher's prefix.

        Args:
            pattern: URL pattern (e.g., /users/:id)
            handler: Callable taking a request and returning a response
            method: HTTP method filter (None for any method)
            name: Optional route name for url_for()
            **meta: Free-form metadata kept on the Route

        Returns:
            The registered Route

        Raises:
            RouteError: If the pattern is invalid or handler is not callable
        """
        if not callable(handler):
            raise RouteError(f"Handler for {pattern!r} is not callable: {handler!r}", pattern)

        full_path = (self.prefix + pattern) or "/"
        compiled, param_names = self._compile_pattern(full_path)

        route = Route(
            path=full_path,
            method=method.upper() if method else None,
            handler=handler,
            name=name,
            meta=meta,
            _pattern=compiled,
            _param_names=param_names,
        )
        self._table.add(route)
        return route

    def subrouter(self, prefix: str) -> "Matcher":
        """
        Create a matcher mounted at `prefix`, sharing this route table.
        """
        return Matcher(
            prefix=self.prefix + prefix,
            strict_slashes=self.strict_slashes,
            catch_errors=self.catch_errors,
            _table=self._table,
        )

    def _compile_pattern(self, path: str) -> tuple[re.Pattern, List[str]]:
        """
        Compile a path pattern into an anchored regex.

            "/users/:id/files/*rest"
            → ^/users/(?P<id>[^/]+)/files(?:/(?P<rest>.*))?$
        """
        param_names: List[str] = []
        regex_parts = ["^"]

        segments = [segment for segment in path.split("/") if segment]
        for i, segment in enumerate(segments):
            regex_parts.append("/")

            if segment[0] in ":*":
                param_name = segment[1:] or ("wildcard" if segment[0] == "*" else "")
                if not _PARAM_NAME.match(param_name):
                    raise RouteError(f"Invalid parameter name {segment!r} in {path!r}", path)
                if param_name in param_names:
                    raise RouteError(f"Duplicate parameter {param_name!r} in {path!r}", path)
                param_names.append(param_name)

                if segment[0] == ":":
                    regex_parts.append(f"(?P<{param_name}>[^/]+)")
                else:
                    if i != len(segments) - 1:
                        raise RouteError(f"Wildcard must be the last segment in {path!r}", path)
                    # "/static", "/static/" and "/static/a" all match; the first two capture ""
                    regex_parts[-1] = f"(?:/(?P<{param_name}>.*))?"
            else:
                regex_parts.append(re.escape(segment))

        if not segments:
            regex_parts.append("/")
        elif self.strict_slashes and path.endswith("/"):
            regex_parts.append("/")

        regex_parts.append("$")
        return re.compile("".join(regex_parts)), param_names

    # =========================================================================
    # MATCHING
    # =========================================================================

    def _normalize(self, path: str) -> str:
        if not path.startswith("/"):
            path = "/" + path
        if not self.strict_slashes and path != "/":
            path = path.rstrip("/") or "/"
        return path

    def _visible_routes(self) -> List[Route]:
        """Routes under this matcher's prefix (all of them for the root)."""
        if not self.prefix:
            return self._table.routes
        return [
            route for route in self._table.routes
            if route.path == self.prefix or route.path.startswith(self.prefix + "/")
        ]

    def match(self, method: str, path: str) -> Optional[RouteMatch]:
        """
        Find the first route matching method and path.

        Returns:
            RouteMatch if found, None otherwise
        """
        path = self._normalize(path)

        for route in self._visible_routes():
            if not route.accepts(method):
                continue
            found = route._pattern.match(path)
            if found:
                return RouteMatch(route=route, params=found.groupdict(""))

        return None

    def allowed_methods(self, path: str) -> List[str]:
        """
        Methods registered for a path, for the Allow header of a 405.
        """
        path = self._normalize(path)
        methods = set()

        for route in self._visible_routes():
            if route._pattern.match(path):
                if route.method is None:
                    return list(ALL_METHODS)
                methods.add(route.method)

        return sorted(methods)

    def dispatch(self, request: HTTPRequest) -> HTTPResponse:
        """
        Route a request to its handler.

        1. Find the matching route
        2. Inject path parameters into the request
        3. Call the handler (middleware already wrapped around it)
        4. 405 if the path exists under other methods, else 404
        """
        found = self.match(request.method, request.path)

        if found is None:
            allowed = self.allowed_methods(request.path)
            if allowed:
                return method_not_allowed(allowed)
            return not_found(f"No route matches {request.path}")

        request.path_params = found.params

        if not self.catch_errors:
            return found.route.handler(request)

        try:
            return found.route.handler(request)
        except Exception as e:
            logger.exception(f"Handler error for {request.method} {request.path}: {e}")
            return internal_error()

    # =========================================================================
    # INTROSPECTION
    # =========================================================================

    def url_for(self, name: str, **params: str) -> Optional[str]:
        """
        Build the URL of a named route (reverse routing).

            matcher.url_for("get_user", id="123")  # "/users/123"

        Returns None for an unknown name.
        """
        route = self._table.named.get(name)
        if route is None:
            return None

        def substitute(found: re.Match) -> str:
            param_name = found.group(2) or "wildcard"
            if param_name not in params:
                return found.group(0)
            return str(params[param_name])

        # Whole segments only: ":id" must not touch ":id_x"
        return _SEGMENT_PARAM.sub(substitute, route.path)

    def routes(self) -> List[Route]:
        """Every route in the shared table, in registration order."""
        return list(self._table.routes)
