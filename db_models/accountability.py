# db_models/accountability.py
from datetime import datetime
from enum import Enum

from sqlalchemy import Boolean, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from db_base import Base
from db_models.collection import StampedColumns


class AccountabilityStatus(str, Enum):
    PENDING_CONFIRMATION = "Pending Confirmation"
    COMPLETED = "Completed"
    RETURNED = "Returned"


# A form in one of these states holds its asset
ACTIVE_ACCOUNTABILITY_STATUSES = (
    AccountabilityStatus.PENDING_CONFIRMATION.value,
    AccountabilityStatus.COMPLETED.value,
)


class AccountabilityRecord(StampedColumns, Base):
    __tablename__ = "accountability_forms"

    form_id: Mapped[str] = mapped_column(String(50), primary_key=True)

    asset_tag: Mapped[str] = mapped_column(String(50), nullable=False, index=True)

    # Employee reference is an id/email pair; lookups match either
    employee_id: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    employee_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    employee_email: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    department: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    position: Mapped[str] = mapped_column(String(255), nullable=False, default="")

    assignment_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    it_personnel: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    it_signature: Mapped[str] = mapped_column(Text, nullable=False, default="")

    employee_confirmed: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    employee_signature: Mapped[str] = mapped_column(Text, nullable=False, default="")
    confirmation_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    status: Mapped[str] = mapped_column(String(30), nullable=False, index=True)
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")
    document_ref: Mapped[str] = mapped_column(String(500), nullable=False, default="")

    return_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    return_condition: Mapped[str] = mapped_column(String(20), nullable=False, default="")
    returned_to: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    return_notes: Mapped[str] = mapped_column(Text, nullable=False, default="")
