"""
=============================================================================
HTTP REQUEST
=============================================================================

The request object that flows through every middleware layer and finally
reaches the route handler.

Parsing raw bytes off a socket is the transport's job, not ours. By the
time a request reaches the router it is already a structured value:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        REQUEST LIFECYCLE                            │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   transport          HTTPRequest           middleware ... handler    │
    │   (outside)  ──────►  dataclass   ──────►  request.set("user", u)    │
    │                          │                 request.param("id")       │
    │                          │                                           │
    │                  method, path, headers,                              │
    │                  query_params, body,                                 │
    │                  path_params  ◄── filled in by the matcher           │
    │                  context      ◄── per-request values                 │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
PER-REQUEST CONTEXT
=============================================================================

Middleware often needs to hand something to the layers below it: the
authenticated user, a request id, a database session. Instead of a global
or a thread-local, the value rides on the request itself:

    def auth(next, request):
        request.set("user", load_user(request))
        return next(request)

    def profile(request):
        return ok({"name": request.get("user").name})

Each request gets its own dict, so concurrent requests never see each
other's values.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any
from urllib.parse import parse_qs, urlsplit, unquote


@dataclass
class HTTPRequest:
    """
    Represents an HTTP request as seen by handlers and middleware.

    =========================================================================
    ATTRIBUTES
    =========================================================================

        method:         HTTP method (GET, POST, ...), upper-cased
        path:           Request path WITHOUT query string
        headers:        Header dict with LOWERCASE keys
        query_params:   "?a=1&a=2&b=3" → {"a": ["1", "2"], "b": ["3"]}
        body:           Raw body bytes (never parsed here)
        path_params:    Variables extracted by the matcher
                        "/users/:id" with "/users/7" → {"id": "7"}
        client_address: (ip, port) of the peer, if the transport knows it
        context:        Per-request values shared along the chain

    =========================================================================
    """

    method: str
    path: str
    headers: Dict[str, str] = field(default_factory=dict)
    query_params: Dict[str, list[str]] = field(default_factory=dict)
    body: bytes = b""
    path_params: Dict[str, str] = field(default_factory=dict)
    client_address: tuple[str, int] = ("", 0)
    context: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        self.method = self.method.upper()
        # Header names are case-insensitive (RFC 7230), normalize once
        self.headers = {name.lower(): value for name, value in self.headers.items()}

    @classmethod
    def from_target(
        cls,
        method: str,
        target: str,
        headers: Optional[Dict[str, str]] = None,
        body: bytes = b"",
        client_address: tuple[str, int] = ("", 0),
    ) -> "HTTPRequest":
        """
        Build a request from a raw request target.

        The target is what appears on the request line, query string
        included:

            HTTPRequest.from_target("GET", "/users?page=2")
            # path="/users", query_params={"page": ["2"]}

        Args:
            method: HTTP method
            target: Request target (path plus optional query string)
            headers: Optional request headers
            body: Optional raw body
            client_address: Optional (ip, port) of the client

        Returns:
            A new HTTPRequest
        """
        parts = urlsplit(target)
        return cls(
            method=method,
            path=unquote(parts.path) or "/",
            headers=dict(headers or {}),
            query_params=parse_qs(parts.query, keep_blank_values=True),
            body=body,
            client_address=client_address,
        )

    @property
    def user_agent(self) -> str:
        """The User-Agent header, or an empty string."""
        return self.headers.get("user-agent", "")

    # =========================================================================
    # ACCESSORS
    # =========================================================================

    def get_header(self, name: str, default: str = "") -> str:
        """Get a header value (case-insensitive lookup)."""
        return self.headers.get(name.lower(), default)

    def get_query(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """
        Get the first value of a query parameter.

        Example:
            # URL: /users?page=1&page=2
            request.get_query("page")  # Returns "1"
        """
        values = self.query_params.get(name, [])
        return values[0] if values else default

    def get_query_list(self, name: str) -> list[str]:
        """Get all values of a query parameter (empty list if missing)."""
        return self.query_params.get(name, [])

    def param(self, name: str, default: str = "") -> str:
        """
        Get a path variable extracted by the matcher.

        Example:
            # Route /users/:id, request /users/42
            request.param("id")  # Returns "42"
        """
        return self.path_params.get(name, default)

    # =========================================================================
    # PER-REQUEST CONTEXT
    # =========================================================================

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value stored on this request by an earlier layer."""
        return self.context.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Store a value for the layers further down the chain."""
        self.context[key] = value
