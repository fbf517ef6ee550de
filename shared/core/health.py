"""
Database health checks used before schema creation and seeding.

Response layout follows the "Health Check Response Format for HTTP APIs"
draft so the same dict can be logged or served as-is.
"""

from sqlalchemy import text
from sqlalchemy.engine import Engine
from typing import Dict, Any
from datetime import datetime, timezone
from enum import Enum
import time
import logging

logger = logging.getLogger(__name__)

class HealthStatus(str, Enum):
    """Health status values following industry standards"""
    PASS = "pass"
    FAIL = "fail"
    WARN = "warn"

def _now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")

class DatabaseHealth:
    """
    Connectivity check for one engine.

    Keeps a running count of checks so callers can report how many
    attempts a readiness wait took.
    """

    def __init__(self, engine: Engine, slow_threshold_ms: float = 1000.0):
        self.engine = engine
        self.slow_threshold_ms = slow_threshold_ms
        self.checks_performed = 0
        self.last_check_time = None

    def check(self) -> Dict[str, Any]:
        """Run ``SELECT 1`` and report status and latency"""
        self.checks_performed += 1
        self.last_check_time = time.time()
        try:
            start_time = time.time()
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1")).fetchone()
            response_time = (time.time() - start_time) * 1000

            status = HealthStatus.PASS
            if response_time > self.slow_threshold_ms:
                status = HealthStatus.WARN

            return {
                "status": status,
                "componentType": "datastore",
                "componentId": self.engine.url.render_as_string(hide_password=True),
                "observedValue": f"{response_time:.2f}ms",
                "observedUnit": "ms",
                "time": _now()
            }
        except Exception as e:
            logger.warning(f"Database health check failed: {e}")
            return {
                "status": HealthStatus.FAIL,
                "componentType": "datastore",
                "componentId": self.engine.url.render_as_string(hide_password=True),
                "output": str(e),
                "time": _now()
            }

    def is_ready(self) -> bool:
        return self.check()["status"] != HealthStatus.FAIL
