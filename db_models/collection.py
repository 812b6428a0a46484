# db_models/collection.py
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import DateTime, String, Table
from sqlalchemy.orm import Mapped, mapped_column

from db_base import Base


class StampedColumns:
    """Created/modified audit fields stamped by the record store."""

    created_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, sort_order=100
    )
    created_by: Mapped[str] = mapped_column(
        String(255), nullable=False, default="", sort_order=100
    )
    modified_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, sort_order=100
    )
    modified_by: Mapped[str] = mapped_column(
        String(255), nullable=False, default="", sort_order=100
    )


@dataclass(frozen=True)
class Collection:
    """
    A named record collection with a fixed, ordered column schema.

    The column order is the declaration order of the mapped table.
    """

    name: str
    model: type[Base]
    key_column: str
    stamped: bool = True
    audited: bool = True

    @property
    def table(self) -> Table:
        return self.model.__table__

    @property
    def columns(self) -> list[str]:
        return [column.name for column in self.table.columns]

    def has_column(self, column: str) -> bool:
        return column in self.table.columns

    def is_text(self, column: str) -> bool:
        return isinstance(self.table.columns[column].type, String)

    def empty_value(self, column: str):
        """Value written for a column missing from an inserted record."""
        return "" if self.is_text(column) else None
