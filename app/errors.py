"""Error taxonomy for schema creation, seeding and store writes."""
from typing import Any, Optional


class StoreError(Exception):
    """Base class for every error raised by the store."""


class ConstraintViolationError(StoreError):
    """A row broke a unique, not-null, check, enum or foreign-key constraint."""

    def __init__(self, table: str, row: Optional[int], values: dict[str, Any], constraint: str):
        self.table = table
        self.row = row
        self.values = values
        self.constraint = constraint
        where = f"{table} row {row}" if row is not None else table
        super().__init__(f"Constraint violated on {where}: {constraint}")


class DependencyOrderError(StoreError):
    """A table was created before a table it references."""

    def __init__(self, table: str, missing: list[str]):
        self.table = table
        self.missing = missing
        super().__init__(
            f"Cannot create table '{table}': referenced table(s) {', '.join(missing)} do not exist yet"
        )


class DuplicateObjectError(StoreError):
    """The object being created already exists."""

    def __init__(self, kind: str, name: str):
        self.kind = kind
        self.name = name
        super().__init__(f"{kind} '{name}' already exists")


class RestrictedDeleteError(StoreError):
    """A delete was blocked because dependent rows still reference the row."""

    def __init__(self, table: str, dependent_table: str, column: str, count: int):
        self.table = table
        self.dependent_table = dependent_table
        self.column = column
        self.count = count
        super().__init__(
            f"Cannot delete from '{table}': {count} row(s) in '{dependent_table}.{column}' still reference it"
        )


class ImmutableFieldError(StoreError):
    """Write to a write-once column or an append-only table."""


class InsufficientStockError(StoreError):
    def __init__(self, product_id: int, requested: int):
        self.product_id = product_id
        self.requested = requested
        super().__init__(f"Not enough stock for product {product_id} (requested {requested})")


class NotFoundError(StoreError):
    def __init__(self, entity: str, key: Any):
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} {key} not found")


class CategoryCycleError(StoreError):
    """Re-parenting would make a category its own ancestor."""
