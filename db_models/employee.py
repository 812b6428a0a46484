# db_models/employee.py
from enum import Enum

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from db_base import Base
from db_models.collection import StampedColumns


class EmployeeStatus(str, Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"


class Employee(StampedColumns, Base):
    __tablename__ = "employees"

    # Lower-cased email unless supplied explicitly
    employee_id: Mapped[str] = mapped_column(String(255), primary_key=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    email: Mapped[str] = mapped_column(String(255), nullable=False, default="", index=True)
    department: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    position: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    phone: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=EmployeeStatus.ACTIVE.value,
    )

    # Cache recomputed after each assignment/return; the assets table is authoritative
    assets_assigned: Mapped[int | None] = mapped_column(Integer, nullable=True)
