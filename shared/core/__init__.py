"""Shared core utilities.

Provides database health checks and structured logging.
"""

from .health import DatabaseHealth, HealthStatus
from .logging_config import (
    setup_logging,
    get_logger,
    set_load_context,
    generate_run_id,
    LoggerAdapter,
)

__all__ = [
    # Health checks
    "DatabaseHealth",
    "HealthStatus",
    # Logging
    "setup_logging",
    "get_logger",
    "set_load_context",
    "generate_run_id",
    "LoggerAdapter",
]
