# /app/services/database_helpers/upsert.py

"""
Dialect-aware INSERT ... ON CONFLICT helpers.

Every "insert if absent" in the application goes through these; the
database's unique constraints decide the winner of a race. Both SQLite and
PostgreSQL support the same `on_conflict_do_nothing` / `on_conflict_do_update` API.
"""

from typing import Dict, Iterable, List

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

_DIALECT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def dialect_insert(db: Session, model):
    """Returns the dialect-specific Core `insert()` for the model's table."""
    dialect_name = db.get_bind().dialect.name
    try:
        insert_fn = _DIALECT_INSERTS[dialect_name]
    except KeyError:
        raise RuntimeError(f"Upserts are not supported on the '{dialect_name}' dialect.") from None
    return insert_fn(model.__table__)


def insert_ignore(db: Session, model, rows: List[Dict]) -> int:
    """
    Inserts `rows`, silently skipping any that would violate a unique constraint.
    Returns the number of rows actually written.
    """
    if not rows:
        return 0
    stmt = dialect_insert(db, model).values(rows).on_conflict_do_nothing()
    result = db.connection().execute(stmt)
    return result.rowcount or 0


def upsert(db: Session, model, row: Dict, conflict_columns: Iterable[str], update_columns: Iterable[str]) -> None:
    """Inserts `row`, or updates `update_columns` on the row already holding its conflict key."""
    stmt = dialect_insert(db, model).values(**row)
    stmt = stmt.on_conflict_do_update(
        index_elements=list(conflict_columns),
        set_={column: stmt.excluded[column] for column in update_columns},
    )
    db.connection().execute(stmt)
