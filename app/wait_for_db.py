"""Database readiness check run before the schema is (re)created."""
import time
from typing import Optional
from sqlalchemy.engine import Engine
from app.core_settings import get_settings
from shared.core import DatabaseHealth, HealthStatus, get_logger

logger = get_logger(__name__)

def wait(engine: Engine, max_attempts: Optional[int] = None, delay: Optional[float] = None) -> bool:
    settings = get_settings()
    max_attempts = max_attempts or settings.DB_WAIT_ATTEMPTS
    delay = settings.DB_WAIT_SECONDS if delay is None else delay
    health = DatabaseHealth(engine)
    for attempt in range(1, max_attempts + 1):
        result = health.check()
        if result["status"] != HealthStatus.FAIL:
            logger.info(f"Database ready after {attempt} attempt(s).")
            return True
        logger.info(f"DB not ready (attempt {attempt}): {result.get('output')}")
        if attempt < max_attempts:
            time.sleep(delay)
    raise SystemExit("Database not ready after max attempts")
