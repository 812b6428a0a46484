# db_models/disposal.py
from datetime import date, datetime
from enum import Enum

from sqlalchemy import Date, DateTime, Float, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from db_base import Base
from db_models.collection import StampedColumns


class DisposalStatus(str, Enum):
    PENDING_APPROVAL = "Pending Approval"
    APPROVED = "Approved"
    REJECTED = "Rejected"
    CANCELLED = "Cancelled"


class DisposalMethod(str, Enum):
    SALE = "Sale"
    DONATION = "Donation"
    RECYCLING = "Recycling"
    DESTRUCTION = "Destruction"
    TRADE_IN = "Trade-in"
    RETURN_TO_VENDOR = "Return to Vendor"


class DisposalRecord(StampedColumns, Base):
    __tablename__ = "disposals"

    disposal_id: Mapped[str] = mapped_column(String(50), primary_key=True)

    asset_tag: Mapped[str] = mapped_column(String(50), nullable=False, index=True)

    method: Mapped[str] = mapped_column(String(30), nullable=False, default="")
    disposal_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    reason: Mapped[str] = mapped_column(Text, nullable=False, default="")

    # Requester is the IT personnel raising the request
    requested_by: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    requester_email: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    requester_signature: Mapped[str] = mapped_column(Text, nullable=False, default="")

    approver_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    approver_email: Mapped[str] = mapped_column(String(255), nullable=False, default="", index=True)
    approver_signature: Mapped[str] = mapped_column(Text, nullable=False, default="")
    approval_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    estimated_value: Mapped[float | None] = mapped_column(Float, nullable=True)
    status: Mapped[str] = mapped_column(String(30), nullable=False, index=True)
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")
    document_ref: Mapped[str] = mapped_column(String(500), nullable=False, default="")
