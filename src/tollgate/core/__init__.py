"""Core Tollgate utilities.

This module exports core utilities for use throughout the application.
"""

from tollgate.core.clock import Clock, utc_now
from tollgate.core.config import Settings, get_settings
from tollgate.core.logging import (
    bind_correlation_id,
    clear_context,
    configure_logging,
    get_logger,
)

__all__ = [
    "Clock",
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    "bind_correlation_id",
    "clear_context",
    "utc_now",
]
