"""Core utilities for the certificate engine.

This module exports commonly used utilities for easy importing:
    from certengine.core import get_logger
"""

from certengine.core.logger import (
    bind_contextvars,
    clear_contextvars,
    configure_logging,
    get_logger,
)

__all__ = [
    "get_logger",
    "configure_logging",
    "bind_contextvars",
    "clear_contextvars",
]
