# db_models/asset.py
from datetime import date, datetime
from enum import Enum

from sqlalchemy import Date, DateTime, Float, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from db_base import Base
from db_models.collection import StampedColumns


class AssetStatus(str, Enum):
    AVAILABLE = "Available"
    ASSIGNED = "Assigned"
    UNDER_MAINTENANCE = "Under Maintenance"
    RESERVED = "Reserved"
    DISPOSED = "Disposed"
    LOST = "Lost"


class AssetCondition(str, Enum):
    NEW = "New"
    GOOD = "Good"
    FAIR = "Fair"
    POOR = "Poor"
    DAMAGED = "Damaged"


class Asset(StampedColumns, Base):
    __tablename__ = "assets"

    # IT-1000, IT-1001, ... generated from the settings counter; never changes
    asset_tag: Mapped[str] = mapped_column(String(50), primary_key=True)

    # Unique across assets; enforced by the registry, not the table
    serial_number: Mapped[str] = mapped_column(String(100), nullable=False, index=True)

    category: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    brand: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    model: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    specifications: Mapped[str] = mapped_column(Text, nullable=False, default="")

    condition: Mapped[str] = mapped_column(String(20), nullable=False, default="")
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=AssetStatus.AVAILABLE.value,
    )
    location: Mapped[str] = mapped_column(String(255), nullable=False, default="")

    date_received: Mapped[date | None] = mapped_column(Date, nullable=True)
    supplier: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    purchase_price: Mapped[float | None] = mapped_column(Float, nullable=True)
    warranty_expiry: Mapped[date | None] = mapped_column(Date, nullable=True)

    # Employee id; empty unless status is Assigned
    assigned_to: Mapped[str] = mapped_column(String(255), nullable=False, default="", index=True)
    assignment_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")
