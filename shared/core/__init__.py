"""Shared core utilities for the services.

Provides common health check and logging functionality.
"""

from .health import ServiceHealth, HealthStatus
from .logging_config import (
    setup_logging,
    get_logger,
    RequestLoggingMiddleware,
    set_request_context,
    clear_request_context,
    get_trace_context,
    generate_request_id,
    LoggerAdapter,
)

__all__ = [
    # Health checks
    "ServiceHealth",
    "HealthStatus",
    # Logging
    "setup_logging",
    "get_logger",
    "RequestLoggingMiddleware",
    "set_request_context",
    "clear_request_context",
    "get_trace_context",
    "generate_request_id",
    "LoggerAdapter",
]
