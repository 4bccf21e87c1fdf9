"""
=============================================================================
ROUTER CONFIGURATION
=============================================================================

Centralized settings for a Router and the matcher it creates.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION SOURCES                            │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   1. Code                                                            │
    │      └── Router(config=RouterConfig(strict_slashes=True))           │
    │                                                                      │
    │   2. Environment variables                                           │
    │      └── MUXCHAIN_LOG_LEVEL=DEBUG → RouterConfig.from_env()         │
    │                                                                      │
    │   3. Default values (in this dataclass)                             │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Validation happens once, when the Router is created, not on the first
request.

=============================================================================
"""

import logging
import os
from dataclasses import dataclass


_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_LOG_FORMATS = ("text", "json")

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise ValueError(f"{name} must be a boolean (1/0, true/false, yes/no, on/off), got {raw!r}")


@dataclass
class RouterConfig:
    """
    Configuration for a Router.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    MATCHING
    - strict_slashes

    ERROR HANDLING
    - catch_errors

    LOGGING
    - log_level, log_format

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # MATCHING
    # ─────────────────────────────────────────────────────────────────────

    strict_slashes: bool = False
    """
    Whether "/users/" and "/users" are different paths.
    False - trailing slash ignored on both patterns and requests
    True  - a pattern ending in "/" only matches paths ending in "/"
    """

    # ─────────────────────────────────────────────────────────────────────
    # ERROR HANDLING
    # ─────────────────────────────────────────────────────────────────────

    catch_errors: bool = True
    """
    Turn an exception escaping a route's chain into a 500 response.
    The traceback is logged either way; set False to let it propagate
    (useful in tests).
    """

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """
    Level for the "muxchain" logger (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    DEBUG shows every route registration with its middleware count.
    """

    log_format: str = "text"
    """
    Access log format used by the example setup: 'text' or 'json'.
    """

    @classmethod
    def from_env(cls) -> "RouterConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        MUXCHAIN_STRICT_SLASHES  Trailing slash significant (default: false)
        MUXCHAIN_CATCH_ERRORS    Handler errors become 500s (default: true)
        MUXCHAIN_LOG_LEVEL       Logging level (default: INFO)
        MUXCHAIN_LOG_FORMAT      text or json (default: text)

        =====================================================================
        """
        return cls(
            strict_slashes=_env_bool("MUXCHAIN_STRICT_SLASHES", False),
            catch_errors=_env_bool("MUXCHAIN_CATCH_ERRORS", True),
            log_level=os.getenv("MUXCHAIN_LOG_LEVEL", "INFO").upper(),
            log_format=os.getenv("MUXCHAIN_LOG_FORMAT", "text").lower(),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ValueError: On an unknown log level or log format
        """
        if self.log_level.upper() not in _LOG_LEVELS:
            raise ValueError(
                f"Invalid log_level: {self.log_level!r}. Must be one of {', '.join(_LOG_LEVELS)}."
            )

        if self.log_format not in _LOG_FORMATS:
            raise ValueError(f"log_format must be 'text' or 'json', got {self.log_format!r}")

    def setup_logging(self) -> None:
        """Configure root logging and the "muxchain" logger level."""
        level = getattr(logging, self.log_level.upper(), logging.INFO)

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        logging.getLogger("muxchain").setLevel(level)
