"""Explicit ON DELETE handling driven by the foreign keys in the metadata.

Engines that enforce foreign-key actions natively do the same work; this
path gives every engine identical behaviour and a readable error when a
RESTRICT dependent blocks the delete.
"""
from sqlalchemy import ForeignKeyConstraint, Table, delete, func, select, update
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement
from typing import Any

from app.domain.models import Base
from app.errors import NotFoundError, RestrictedDeleteError
from shared.core import get_logger

logger = get_logger(__name__)


def referencing_constraints(table: Table) -> list[ForeignKeyConstraint]:
    """Foreign keys in any table that point at ``table``."""
    found = []
    for other in Base.metadata.sorted_tables:
        for constraint in other.foreign_key_constraints:
            if constraint.referred_table is table:
                found.append(constraint)
    return found


def _parent_keys(session: Session, constraint: ForeignKeyConstraint, where: ColumnElement) -> list[Any]:
    # Read up front: MySQL refuses a dependent UPDATE/DELETE whose filter
    # selects from the table being modified
    column = constraint.elements[0].column
    return session.execute(select(column).where(where)).scalars().all()


def _dependents(constraint: ForeignKeyConstraint, keys: list[Any]) -> ColumnElement:
    return constraint.elements[0].parent.in_(keys)


def _delete_where(session: Session, table: Table, where: ColumnElement) -> int:
    constraints = referencing_constraints(table)
    keys = {constraint: _parent_keys(session, constraint, where) for constraint in constraints}

    # RESTRICT (and NO ACTION) is checked before anything is touched
    for constraint in constraints:
        policy = (constraint.ondelete or "RESTRICT").upper()
        if policy in ("RESTRICT", "NO ACTION") and keys[constraint]:
            child = constraint.table
            count = session.execute(
                select(func.count()).select_from(child).where(_dependents(constraint, keys[constraint]))
            ).scalar_one()
            if count:
                raise RestrictedDeleteError(table.name, child.name, constraint.elements[0].parent.name, count)

    for constraint in constraints:
        if (constraint.ondelete or "").upper() == "SET NULL" and keys[constraint]:
            column = constraint.elements[0].parent
            session.execute(
                update(constraint.table)
                .where(_dependents(constraint, keys[constraint]))
                .values({column.name: None})
            )

    for constraint in constraints:
        if (constraint.ondelete or "").upper() == "CASCADE" and keys[constraint]:
            removed = _delete_where(session, constraint.table, _dependents(constraint, keys[constraint]))
            if removed:
                logger.debug(f"Cascaded delete of {removed} row(s) from {constraint.table.name}")

    return session.execute(delete(table).where(where)).rowcount


def delete_row(session: Session, model: type[Base], pk: Any) -> None:
    """Delete one row, applying every table's ON DELETE policy explicitly.

    Runs inside a savepoint: a RESTRICT violation anywhere in the cascade
    leaves the database untouched.
    """
    table = model.__table__
    pk_column = list(table.primary_key.columns)[0]
    session.flush()
    with session.begin_nested():
        removed = _delete_where(session, table, pk_column == pk)
        if not removed:
            raise NotFoundError(model.__name__, pk)
    # Identity map may still hold rows removed or nulled above
    session.expire_all()
    logger.info(f"Deleted {table.name} {pk}")
