"""Seed loader: validates and inserts the fixed dataset in dependency order."""
from sqlalchemy import insert, Table
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import DataError, IntegrityError
from pydantic import ValidationError
from datetime import datetime
from typing import Any, Optional
import time

from app.application.schemas import ROW_SCHEMAS
from app.application.seed_data import build_seed_rows
from app.domain.models import Base
from app.errors import ConstraintViolationError, StoreError
from shared.core import get_logger, set_load_context

logger = get_logger(__name__)

SEED_ORDER = (
    "users",
    "suppliers",
    "categories",
    "products",
    "product_categories",
    "inventory",
    "addresses",
    "orders",
    "order_items",
    "payments",
    "product_images",
    "reviews",
    "product_price_history",
)

EXPECTED_SEED_COUNTS = {
    "users": 12,
    "addresses": 10,
    "suppliers": 3,
    "categories": 5,
    "products": 25,
    "product_categories": 25,
    "product_images": 5,
    "inventory": 25,
    "orders": 5,
    "order_items": 6,
    "payments": 5,
    "reviews": 5,
    "product_price_history": 5,
}


def _references(table: Table) -> dict[str, str]:
    return {fk.parent.name: fk.column.table.name for fk in table.foreign_keys}


def _describe(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
    )


class SeedLoader:
    """Insert seed rows table by table inside a single transaction.

    Foreign keys in the rows are positions into the referenced table's
    rows; they are replaced with the primary keys the database assigned.
    The first failing row aborts and rolls back the whole load.
    """

    def __init__(
        self,
        engine: Engine,
        reference_time: Optional[datetime] = None,
        rows: Optional[dict[str, list[dict[str, Any]]]] = None,
    ):
        self.engine = engine
        self.rows = rows if rows is not None else build_seed_rows(reference_time)
        self._ids: dict[str, list[Any]] = {}

    def load(self) -> dict[str, int]:
        self._ids = {}
        counts = {}
        start_time = time.time()
        try:
            with self.engine.begin() as conn:
                for table_name in SEED_ORDER:
                    set_load_context(table=table_name)
                    counts[table_name] = self._load_table(conn, table_name, self.rows.get(table_name, []))
                    logger.info(f"Loaded {counts[table_name]} rows into {table_name}")
        except ConstraintViolationError as exc:
            logger.error(
                "Seed load aborted; all inserts rolled back",
                extra={'extra_fields': {'table': exc.table, 'row': exc.row, 'constraint': exc.constraint}}
            )
            raise
        finally:
            set_load_context(table=None)

        logger.info(
            "Seed load complete",
            extra={'extra_fields': {'rows': counts}, 'duration': time.time() - start_time}
        )
        return counts

    def _load_table(self, conn: Connection, table_name: str, rows: list[dict[str, Any]]) -> int:
        table = Base.metadata.tables[table_name]
        schema = ROW_SCHEMAS[table_name]
        references = _references(table)
        single_pk = len(table.primary_key.columns) == 1
        ids = self._ids.setdefault(table_name, [])

        for row_number, raw in enumerate(rows, start=1):
            try:
                values = schema(**raw).model_dump(exclude_none=True)
            except ValidationError as exc:
                raise ConstraintViolationError(table_name, row_number, raw, _describe(exc)) from exc

            self._resolve(table_name, row_number, values, references)
            try:
                result = conn.execute(insert(table).values(**values))
            except (IntegrityError, DataError) as exc:
                raise ConstraintViolationError(table_name, row_number, values, str(exc.orig)) from exc

            if single_pk:
                ids.append(result.inserted_primary_key[0])
        return len(rows)

    def _resolve(self, table_name: str, row_number: int, values: dict[str, Any], references: dict[str, str]) -> None:
        for column, ref_table in references.items():
            position = values.get(column)
            if position is None:
                continue
            known = self._ids.get(ref_table, [])
            if not 1 <= position <= len(known):
                raise ConstraintViolationError(
                    table_name, row_number, values,
                    f"FOREIGN KEY {table_name}.{column} -> {ref_table}: no {ref_table} row at position {position}",
                )
            values[column] = known[position - 1]


def verify_seed_counts(counts: dict[str, int], expected: dict[str, int] = EXPECTED_SEED_COUNTS) -> None:
    mismatched = {
        table: (counts.get(table), want) for table, want in expected.items() if counts.get(table) != want
    }
    if mismatched:
        detail = ", ".join(f"{t}: {got} (expected {want})" for t, (got, want) in mismatched.items())
        raise StoreError(f"Seed row counts do not match: {detail}")
