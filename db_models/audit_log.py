# db_models/audit_log.py
from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from db_base import Base


class AuditAction(str, Enum):
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class AuditLogEntry(Base):
    __tablename__ = "audit_log"

    entry_id: Mapped[str] = mapped_column(String(32), primary_key=True)
    timestamp: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    actor: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    action: Mapped[str] = mapped_column(String(10), nullable=False)
    collection: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    record_key: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

    # JSON snapshots of the row; empty when not applicable to the action
    before_snapshot: Mapped[str] = mapped_column(Text, nullable=False, default="")
    after_snapshot: Mapped[str] = mapped_column(Text, nullable=False, default="")
