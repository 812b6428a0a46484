# store/queries.py
"""
SQLAlchemy query builders for the generic record store.
"""
from typing import Any

from sqlalchemy import String, and_, cast, delete, or_, select, update

from db_models import AUDIT_LOG, Collection


def _primary_key(collection: Collection):
    return collection.table.columns[collection.key_column]


def select_all(collection: Collection):
    """Full scan of a collection, ordered by its key column."""
    return select(collection.table).order_by(_primary_key(collection).asc())


def select_matching(collection: Collection, column: str, value: Any):
    """Rows whose `column` equals `value` exactly, key order (first match first)."""
    table = collection.table
    return (
        select(table)
        .where(table.columns[column] == value)
        .order_by(_primary_key(collection).asc())
    )


def update_by_key(collection: Collection, key_value: Any, values: dict[str, Any]):
    """Update the single row identified by the collection's primary key."""
    return (
        update(collection.table)
        .where(_primary_key(collection) == key_value)
        .values(**values)
    )


def delete_by_key(collection: Collection, key_value: Any):
    """Delete the single row identified by the collection's primary key."""
    return delete(collection.table).where(_primary_key(collection) == key_value)


def search_query(
    collection: Collection,
    filters: dict[str, Any] | None = None,
    text: str | None = None,
):
    """
    Filter a collection.

    Text columns match case-insensitively as substrings, other columns match
    exactly; all filters must hold. `text` matches when any column contains
    it, case-insensitively.
    """
    table = collection.table
    conditions = []
    for name, value in (filters or {}).items():
        column = table.columns[name]
        if collection.is_text(name):
            conditions.append(column.icontains(str(value), autoescape=True))
        else:
            conditions.append(column == value)

    if text:
        conditions.append(
            or_(
                *(
                    (column if collection.is_text(column.name) else cast(column, String))
                    .icontains(text, autoescape=True)
                    for column in table.columns
                )
            )
        )

    stmt = select(table)
    if conditions:
        stmt = stmt.where(and_(*conditions))
    return stmt.order_by(_primary_key(collection).asc())


def select_audit_entries(collection_name: str | None = None, record_key: str | None = None):
    """Audit entries in write order, optionally narrowed to a collection/record."""
    table = AUDIT_LOG.table
    stmt = select(table)
    if collection_name is not None:
        stmt = stmt.where(table.c.collection == collection_name)
    if record_key is not None:
        stmt = stmt.where(table.c.record_key == record_key)
    return stmt.order_by(table.c.entry_id.asc())
