"""
=============================================================================
ACCESS LOGGING MIDDLEWARE
=============================================================================

One log line per request, with timing and a correlation id.

    TEXT (default):
        127.0.0.1 - - [10/Jun/2024:10:55:36 +0000] "GET /api/items" 200 2 0.41ms

    JSON (for log aggregators):
        {"request_id": "a1b2c3d4", "method": "GET", "path": "/api/items",
         "status_code": 200, "duration_ms": 0.41, ...}

Put it FIRST so it is the outermost layer:

    router = Router(LoggingMiddleware())
    router.use(auth)

- requests rejected by inner middleware (auth, rate limits) are logged too
- the timing covers every layer below it
- the request id is on the request before anything else runs

=============================================================================
"""

from dataclasses import dataclass, asdict
from typing import Optional
import json
import logging
import time
import uuid

from .base import Middleware, Handler
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse


# Namespaced so access logs can be routed separately:
#   logging.getLogger("muxchain.access").addHandler(file_handler)
logger = logging.getLogger("muxchain.access")


@dataclass
class RequestLog:
    """Structured access-log entry for one request."""

    request_id: str
    method: str
    path: str
    query: str
    client_ip: str
    user_agent: str
    status_code: int
    content_length: int
    duration_ms: float
    timestamp: str

    def to_dict(self) -> dict:
        entry = asdict(self)
        entry["duration_ms"] = round(self.duration_ms, 2)
        return entry

    def to_text(self) -> str:
        """Apache-style access log line."""
        return (
            f'{self.client_ip or "-"} - - [{self.timestamp}] '
            f'"{self.method} {self.path}" {self.status_code} '
            f'{self.content_length} {self.duration_ms:.2f}ms'
        )


class LoggingMiddleware(Middleware):
    """
    Request logging middleware.

    Usage:
        router.use(LoggingMiddleware())                           # text
        router.use(LoggingMiddleware(log_format="json"))          # JSON
        router.use(LoggingMiddleware(skip_paths=["/health"]))    # quieter
    """

    def __init__(
        self,
        log_format: str = "text",
        include_request_id: bool = True,
        log_level: int = logging.INFO,
        skip_paths: Optional[list[str]] = None,
    ):
        """
        Args:
            log_format: "text" or "json"
            include_request_id: Put the id in the X-Request-ID response header
            log_level: Level access lines are emitted at
            skip_paths: Paths that are never logged (health checks)
        """
        if log_format not in ("text", "json"):
            raise ValueError(f"log_format must be 'text' or 'json', got {log_format!r}")
        self.log_format = log_format
        self.include_request_id = include_request_id
        self.log_level = log_level
        self.skip_paths = set(skip_paths or [])

    def process(self, request: HTTPRequest, next: Handler) -> HTTPResponse:
        # Honour an id set by a proxy in front of us
        request_id = request.get_header("X-Request-ID") or uuid.uuid4().hex[:8]
        request.set("request_id", request_id)

        start_time = time.perf_counter()

        try:
            response = next(request)
        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                f"Request failed: {request.method} {request.path} "
                f"- {type(e).__name__}: {e} ({duration_ms:.2f}ms)"
            )
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000

        if self.include_request_id:
            response.headers["X-Request-ID"] = request_id

        if request.path in self.skip_paths:
            return response

        log_entry = RequestLog(
            request_id=request_id,
            method=request.method,
            path=request.path,
            query="&".join(
                f"{key}={value}"
                for key, values in request.query_params.items()
                for value in values
            ),
            client_ip=request.client_address[0],
            user_agent=request.user_agent or "-",
            status_code=int(response.status),
            content_length=len(response.body),
            duration_ms=duration_ms,
            timestamp=time.strftime("%d/%b/%Y:%H:%M:%S %z"),
        )

        if self.log_format == "json":
            logger.log(self.log_level, json.dumps(log_entry.to_dict()))
        else:
            logger.log(self.log_level, log_entry.to_text())

        return response
