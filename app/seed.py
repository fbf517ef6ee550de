"""Drop, recreate and seed the store database.

Run once against an empty (or disposable) server:

    ecommerce-store-seed

Connection settings come from the environment or ``.env``; see
``app.core_settings.Settings``.
"""
from datetime import datetime
from typing import Optional
from sqlalchemy.engine import Engine

from app.application.loader import SeedLoader, verify_seed_counts
from app.core_settings import get_settings
from app.errors import StoreError
from app.infrastructure.db import get_engine, recreate_database, server_engine
from app.infrastructure.schema import create_schema, table_row_counts
from app.wait_for_db import wait
from shared.core import generate_run_id, get_logger, set_load_context, setup_logging

logger = get_logger(__name__)

def run(engine: Engine, reset: bool = True, reference_time: Optional[datetime] = None) -> dict[str, int]:
    """Create the schema and load the seed; returns the row count per table.

    With ``reset`` the database is dropped first, which makes re-runs
    produce the same fresh state. Without it a second run fails with
    ``DuplicateObjectError``.
    """
    set_load_context(run_id=generate_run_id())
    if reset:
        recreate_database(engine)
    create_schema(engine)
    SeedLoader(engine, reference_time=reference_time).load()
    counts = table_row_counts(engine)
    verify_seed_counts(counts)
    return counts

def main() -> None:
    settings = get_settings()
    setup_logging(service_name=settings.SERVICE_NAME, level=settings.LOG_LEVEL)
    engine = get_engine()

    server = server_engine(engine)
    try:
        wait(server)
    finally:
        if server is not engine:
            server.dispose()

    try:
        counts = run(engine)
    except StoreError as exc:
        logger.error(f"Seed run failed: {exc}", exc_info=True)
        raise SystemExit(1) from exc
    logger.info("Seed run complete", extra={'extra_fields': {'rows': counts}})

if __name__ == "__main__":
    main()
