"""
pytest configuration and fixtures.
"""

from typing import Callable, List
import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from muxchain.http import HTTPRequest, HTTPResponse, ok


@pytest.fixture
def trail() -> List[str]:
    """Records the order in which layers run."""
    return []


@pytest.fixture
def tracing(trail: List[str]) -> Callable[[str], Callable]:
    """
    Factory for middleware that record "<name>-before" / "<name>-after".

        A = tracing("A")
        router.use(A)
    """
    def make(name: str):
        def middleware(next_handler):
            def handler(request: HTTPRequest) -> HTTPResponse:
                trail.append(f"{name}-before")
                response = next_handler(request)
                trail.append(f"{name}-after")
                return response
            return handler
        middleware.__name__ = name
        return middleware
    return make


@pytest.fixture
def terminal(trail: List[str]) -> Callable[[HTTPRequest], HTTPResponse]:
    """Terminal handler that records "H" and answers "ok"."""
    def handler(request: HTTPRequest) -> HTTPResponse:
        trail.append("H")
        return ok("ok")
    return handler
