"""
=============================================================================
MIDDLEWARE CHAIN BUILDER
=============================================================================

A middleware is a DECORATOR FOR HANDLERS: it receives the next handler
and returns a new handler that may run code before and/or after calling
it.

    Handler    = Callable[[HTTPRequest], HTTPResponse]
    Middleware = Callable[[Handler], Handler]

    def timing(next):
        def handler(request):
            start = time.monotonic()
            response = next(request)                     # continue the chain
            response.set_header("X-Time", f"{time.monotonic() - start:.3f}")
            return response
        return handler

=============================================================================
COMPOSITION ORDER
=============================================================================

compose([A, B, C], H) wraps from the inside out:

    Step 1: current = H
    Step 2: current = C(current)     # C calls H
    Step 3: current = B(current)     # B calls C
    Step 4: current = A(current)     # A calls B

    Final: A → B → C → H

    ┌─────────────────────────────────────────────────────────────────────┐
    │  A                                                                  │
    │  ┌───────────────────────────────────────────────────────────────┐  │
    │  │  B                                                            │  │
    │  │  ┌─────────────────────────────────────────────────────────┐  │  │
    │  │  │  C                                                      │  │  │
    │  │  │  ┌───────────────────────────────────────────────────┐  │  │  │
    │  │  │  │                  H (route handler)                │  │  │  │
    │  │  │  └───────────────────────────────────────────────────┘  │  │  │
    │  │  └─────────────────────────────────────────────────────────┘  │  │
    │  └───────────────────────────────────────────────────────────────┘  │
    └─────────────────────────────────────────────────────────────────────┘

    Request IN:   A-before, B-before, C-before, H
    Response OUT: C-after, B-after, A-after

The first middleware in the list is the outermost layer.

=============================================================================
THREE WAYS TO WRITE ONE
=============================================================================

1. Plain function (the canonical shape, shown above)

2. (next, request) function adapted with use_func():

    def require_token(next, request):
        if not request.get_header("Authorization"):
            return unauthorized()                 # chain stops here
        return next(request)

    router.use(use_func(require_token))          # or router.use_func(...)

3. Middleware subclass implementing process():

    class RequestId(Middleware):
        def process(self, request, next):
            request.set("request_id", uuid.uuid4().hex)
            return next(request)

    router.use(RequestId())

=============================================================================
"""

from abc import ABC, abstractmethod
from typing import Callable, Iterable, Iterator, List
import functools
import inspect
import logging

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse


logger = logging.getLogger(__name__)


# =============================================================================
# TYPE ALIASES
# =============================================================================

# A route handler, or a handler that middleware produced around one
Handler = Callable[[HTTPRequest], HTTPResponse]

# Anything that turns the next handler into a new handler
MiddlewareLike = Callable[[Handler], Handler]

# The simplified (next, request) shape accepted by use_func()
MiddlewareFunc = Callable[[Handler, HTTPRequest], HTTPResponse]


def middleware_name(middleware: MiddlewareLike) -> str:
    """Readable name of a middleware for logs and error messages."""
    name = getattr(middleware, "name", None)
    if isinstance(name, str):
        return name
    return getattr(middleware, "__name__", type(middleware).__name__)


def same_middleware(a: MiddlewareLike, b: MiddlewareLike) -> bool:
    """
    Identity comparison of two middleware.

    `obj.method is obj.method` is False in Python: every attribute access
    builds a new bound-method object. Two bound methods are therefore
    treated as the same middleware when they bind the same function to
    the same instance. Everything else must be the very same object.
    """
    if a is b:
        return True
    if inspect.ismethod(a) and inspect.ismethod(b):
        return a.__self__ is b.__self__ and a.__func__ is b.__func__
    return False


def compose(middleware: Iterable[MiddlewareLike], handler: Handler) -> Handler:
    """
    Combine middleware and a terminal handler into a single handler.

    The first middleware becomes the outermost layer. An empty sequence
    returns `handler` itself. Each middleware is called exactly once.

    Args:
        middleware: Ordered middleware, outermost first
        handler: The terminal handler

    Returns:
        The composed handler

    Raises:
        TypeError: If handler is not callable, or a middleware does not
                   return a callable handler
    """
    if not callable(handler):
        raise TypeError(f"Handler must be callable, got {handler!r}")

    current = handler

    # reversed([A, B, C]) = [C, B, A] → A(B(C(handler)))
    for mw in reversed(list(middleware)):
        wrapped = mw(current)
        if not callable(wrapped):
            raise TypeError(
                f"Middleware {middleware_name(mw)} returned {wrapped!r} instead of a handler"
            )
        current = wrapped

    return current


def use_func(func: MiddlewareFunc) -> MiddlewareLike:
    """
    Adapt a (next, request) function into a standard middleware.

    Every time the returned middleware is applied it builds a new handler
    bound to that particular `next`; nothing is shared between chains
    except what `func` itself closes over.

    The adapter keeps `func` as `__wrapped__`, which is what
    Router.skip_func() matches on.

    Usage:
        def log_path(next, request):
            logger.info(request.path)
            return next(request)

        router.use(use_func(log_path))
    """
    if not callable(func):
        raise TypeError(f"Middleware function must be callable, got {func!r}")

    @functools.wraps(func)
    def middleware(next_handler: Handler) -> Handler:
        def handler(request: HTTPRequest) -> HTTPResponse:
            return func(next_handler, request)
        return handler

    return middleware


class Middleware(ABC):
    """
    Base class for class-based middleware.

    Subclasses implement process(request, next). Calling an instance with
    the next handler returns the wrapped handler, so an instance can go
    anywhere a middleware function can:

        class Timing(Middleware):
            def process(self, request, next):
                start = time.monotonic()
                response = next(request)       # skip this to short-circuit
                response.set_header("X-Time", f"{time.monotonic() - start:.3f}")
                return response

        router.use(Timing())
    """

    @abstractmethod
    def process(self, request: HTTPRequest, next: Handler) -> HTTPResponse:
        """
        Handle one request.

        Args:
            request: The incoming request
            next: The rest of the chain; call it to continue

        Returns:
            The response, from next() or produced here
        """

    def __call__(self, next_handler: Handler) -> Handler:
        def handler(request: HTTPRequest) -> HTTPResponse:
            return self.process(request, next_handler)
        return handler

    @property
    def name(self) -> str:
        """Get the middleware name for logging."""
        return self.__class__.__name__


class MiddlewareStack:
    """
    Ordered, copyable list of middleware.

    A Router keeps one of these. Derived routers never share a stack:
    copy(), extend() and without() all return a new one, so appending to
    a child never shows up in its parent (or the other way around).

        stack = MiddlewareStack([logger_mw])
        stack.use(auth_mw)                      # in place
        child = stack.extend(cache_mw)          # [logger_mw, auth_mw, cache_mw]
        public = stack.without(auth_mw)         # [logger_mw]

        handler = stack.wrap(route_handler)     # compose(stack, route_handler)
    """

    def __init__(self, middleware: Iterable[MiddlewareLike] = ()):
        self._middleware: List[MiddlewareLike] = []
        self.use(*middleware)

    def add(self, middleware: MiddlewareLike) -> "MiddlewareStack":
        """
        Append one middleware.

        Raises:
            TypeError: If middleware is not callable
        """
        if not callable(middleware):
            raise TypeError(f"Middleware must be callable, got {middleware!r}")
        self._middleware.append(middleware)
        logger.debug(f"Added middleware: {middleware_name(middleware)}")
        return self

    def use(self, *middleware: MiddlewareLike) -> "MiddlewareStack":
        """Append several middleware, in order."""
        for mw in middleware:
            self.add(mw)
        return self

    def copy(self) -> "MiddlewareStack":
        """An independent stack with the same entries."""
        stack = MiddlewareStack()
        stack._middleware = list(self._middleware)
        return stack

    def extend(self, *middleware: MiddlewareLike) -> "MiddlewareStack":
        """A copy with `middleware` appended."""
        return self.copy().use(*middleware)

    def without(self, *middleware: MiddlewareLike) -> "MiddlewareStack":
        """
        A copy with every entry identical to one of `middleware` removed.

        Identity, not equality: two middleware built from the same logic
        are different entries. See same_middleware().
        """
        stack = MiddlewareStack()
        stack._middleware = [
            mw for mw in self._middleware
            if not any(same_middleware(mw, target) for target in middleware)
        ]
        return stack

    def without_funcs(self, *funcs: MiddlewareFunc) -> "MiddlewareStack":
        """A copy without the use_func() adapters of `funcs`."""
        stack = MiddlewareStack()
        stack._middleware = [
            mw for mw in self._middleware
            if not any(getattr(mw, "__wrapped__", None) is func for func in funcs)
        ]
        return stack

    def wrap(self, handler: Handler) -> Handler:
        """Compose the current entries around `handler`."""
        return compose(self._middleware, handler)

    def __len__(self) -> int:
        return len(self._middleware)

    def __iter__(self) -> Iterator[MiddlewareLike]:
        return iter(self._middleware)

    def __repr__(self) -> str:
        names = ", ".join(middleware_name(mw) for mw in self._middleware)
        return f"MiddlewareStack([{names}])"
