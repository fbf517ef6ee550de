"""Dependency-ordered schema creation and row counting."""
from sqlalchemy import MetaData, Table, func, inspect, select
from sqlalchemy.engine import Engine
from typing import Iterable, Optional

from app.domain.models import Base
from app.errors import DependencyOrderError, DuplicateObjectError, StoreError
from shared.core import get_logger, set_load_context

logger = get_logger(__name__)

# Referenced tables come before the tables that point at them
TABLE_CREATION_ORDER = (
    "users",
    "addresses",
    "suppliers",
    "categories",
    "products",
    "product_categories",
    "product_images",
    "inventory",
    "orders",
    "order_items",
    "payments",
    "reviews",
    "product_price_history",
)


def referenced_tables(table: Table) -> set[str]:
    return {fk.column.table.name for fk in table.foreign_keys}


def create_schema(
    engine: Engine,
    order: Iterable[str] = TABLE_CREATION_ORDER,
    metadata: MetaData = Base.metadata,
) -> list[str]:
    """Create tables one at a time in ``order``.

    A table whose foreign-key target is neither in the database nor created
    earlier in the run raises ``DependencyOrderError`` before any DDL for it
    is emitted. A self-reference is satisfied by the table itself. Tables
    that already exist raise ``DuplicateObjectError``.
    """
    order = list(order)
    unknown = [name for name in order if name not in metadata.tables]
    if unknown:
        raise StoreError(f"Unknown table(s): {', '.join(unknown)}")

    created = []
    try:
        with engine.begin() as conn:
            existing = set(inspect(conn).get_table_names())
            for name in order:
                table = metadata.tables[name]
                set_load_context(table=name)
                if name in existing:
                    raise DuplicateObjectError("table", name)
                missing = sorted(
                    ref for ref in referenced_tables(table) if ref != name and ref not in existing
                )
                if missing:
                    raise DependencyOrderError(name, missing)
                table.create(conn)
                existing.add(name)
                created.append(name)
                logger.info(f"Created table {name}", extra={'extra_fields': {'indexes': sorted(i.name for i in table.indexes)}})
    finally:
        set_load_context(table=None)
    return created


def drop_schema(engine: Engine, metadata: Optional[MetaData] = None) -> None:
    """Drop every table currently in the database, dependents first."""
    if metadata is None:
        metadata = MetaData()
        metadata.reflect(bind=engine)
    metadata.drop_all(bind=engine)


def table_row_counts(
    engine: Engine,
    order: Iterable[str] = TABLE_CREATION_ORDER,
    metadata: MetaData = Base.metadata,
) -> dict[str, int]:
    with engine.connect() as conn:
        return {
            name: conn.execute(select(func.count()).select_from(metadata.tables[name])).scalar_one()
            for name in order
        }
