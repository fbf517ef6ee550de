"""
Structured logging configuration

Every record is emitted as one JSON object so schema creation and seed
loads can be followed line by line in any log aggregator.
"""

import logging
import logging.handlers
import os
import re
import sys
import json
import traceback
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from contextvars import ContextVar
import uuid

# Context variables for load tracking
run_id_var: ContextVar[Optional[str]] = ContextVar('run_id', default=None)
table_var: ContextVar[Optional[str]] = ContextVar('table', default=None)

class StructuredFormatter(logging.Formatter):
    """
    JSON structured logging formatter

    Fields: @timestamp, level, logger, message, service, environment,
    version, location, plus optional load context, error and custom fields.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as structured JSON"""

        log_obj = {
            "@timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": os.getenv('SERVICE_NAME', 'ecommerce-store'),
            "environment": os.getenv('ENVIRONMENT', 'development'),
            "version": os.getenv('SERVICE_VERSION', '1.0.0'),
        }

        context = self._get_load_context()
        if context:
            log_obj["context"] = context

        log_obj["location"] = {
            "file": record.pathname,
            "line": record.lineno,
            "function": record.funcName,
            "module": record.module
        }

        if record.exc_info:
            log_obj["error"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "stacktrace": traceback.format_exception(*record.exc_info)
            }

        if hasattr(record, 'extra_fields'):
            log_obj["custom"] = record.extra_fields

        if hasattr(record, 'duration_ms'):
            log_obj["performance"] = {
                "duration_ms": record.duration_ms
            }

        return json.dumps(log_obj, default=str)

    def _get_load_context(self) -> Optional[Dict[str, Any]]:
        """Get the current run/table context, if any"""
        context = {}
        run_id = run_id_var.get()
        if run_id:
            context["run_id"] = run_id
        table = table_var.get()
        if table:
            context["table"] = table
        return context or None

class SecurityFilter(logging.Filter):
    """Filter to redact sensitive information from logs"""

    SENSITIVE_FIELDS = [
        'password_hash', 'password', 'token', 'api_key', 'secret',
    ]

    _PATTERN = re.compile(
        r"(?P<key>" + "|".join(SENSITIVE_FIELDS) + r")(?P<sep>['\"]?\s*[:=]\s*)(?P<value>'[^']*'|\"[^\"]*\"|[^\s,}]+)",
        re.IGNORECASE,
    )

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = self._PATTERN.sub(r"\g<key>\g<sep>***REDACTED***", message)
        if redacted != message:
            record.msg = redacted
            record.args = None

        extra = getattr(record, 'extra_fields', None)
        if isinstance(extra, dict):
            record.extra_fields = self._redact_mapping(extra)

        return True

    def _redact_mapping(self, data: Dict[str, Any]) -> Dict[str, Any]:
        cleaned = {}
        for key, value in data.items():
            if key.lower() in self.SENSITIVE_FIELDS:
                cleaned[key] = "***REDACTED***"
            elif isinstance(value, dict):
                cleaned[key] = self._redact_mapping(value)
            else:
                cleaned[key] = value
        return cleaned

class PerformanceFilter(logging.Filter):
    """Filter to add performance metrics to log records"""

    def filter(self, record: logging.LogRecord) -> bool:
        if hasattr(record, 'duration'):
            record.duration_ms = record.duration * 1000
        return True

def setup_logging(
    service_name: str,
    level: str = "INFO",
    enable_console: bool = True,
    enable_file: bool = False,
    log_file: Optional[str] = None
) -> None:
    """
    Setup structured logging for the loader

    Args:
        service_name: Name reported in every record
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        enable_console: Enable console output
        enable_file: Enable file output
        log_file: Path to log file
    """
    os.environ['SERVICE_NAME'] = service_name

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))
    root_logger.handlers = []

    formatter = StructuredFormatter()

    if enable_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        console_handler.addFilter(PerformanceFilter())
        console_handler.addFilter(SecurityFilter())
        root_logger.addHandler(console_handler)

    if enable_file and log_file:
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=10485760,  # 10MB
            backupCount=5
        )
        file_handler.setFormatter(formatter)
        file_handler.addFilter(PerformanceFilter())
        file_handler.addFilter(SecurityFilter())
        root_logger.addHandler(file_handler)

    logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)
    logging.getLogger('alembic').setLevel(logging.INFO)

    root_logger.info(
        "Logging initialized",
        extra={
            'extra_fields': {
                'service': service_name,
                'level': level,
                'handlers': {
                    'console': enable_console,
                    'file': enable_file
                }
            }
        }
    )

class LoggerAdapter(logging.LoggerAdapter):
    """
    Logger adapter to inject the load context into all log messages
    """

    def process(self, msg, kwargs):
        extra = kwargs.get('extra', {})

        run_id = run_id_var.get()
        if run_id:
            extra['run_id'] = run_id

        table = table_var.get()
        if table:
            extra['table'] = table

        kwargs['extra'] = extra
        return msg, kwargs

def get_logger(name: str) -> LoggerAdapter:
    """
    Get a logger instance with load context support

    Args:
        name: Logger name (usually __name__)

    Returns:
        LoggerAdapter with context injection
    """
    base_logger = logging.getLogger(name)
    return LoggerAdapter(base_logger, {})

def set_load_context(
    run_id: Optional[str] = None,
    table: Optional[str] = None
) -> None:
    """
    Set the context attached to every subsequent log record

    Args:
        run_id: Identifier of the current schema/seed run
        table: Table currently being created or loaded
    """
    if run_id:
        run_id_var.set(run_id)
    table_var.set(table)

def generate_run_id() -> str:
    """Generate a unique run ID"""
    return str(uuid.uuid4())
