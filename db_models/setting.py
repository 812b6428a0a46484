# db_models/setting.py
from datetime import datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from db_base import Base


class Setting(Base):
    """Key/value row; values are stored as text and parsed by the reader."""

    __tablename__ = "settings"

    key: Mapped[str] = mapped_column(String(100), primary_key=True)
    value: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    description: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    modified_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    modified_by: Mapped[str] = mapped_column(String(255), nullable=False, default="")
