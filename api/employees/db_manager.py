# api/employees/db_manager.py
"""
Employee records and the cached count of assets assigned to each.
"""
from typing import Any

from core.errors import DuplicateError, NotFoundError, require_fields
from core.logging import get_logger
from db_models import ASSETS, EMPLOYEES, AssetStatus, EmployeeStatus
from store import RecordStore

logger = get_logger("employees")

REQUIRED_EMPLOYEE_FIELDS = ("name", "email")
EDITABLE_EMPLOYEE_FIELDS = ("name", "email", "department", "position", "phone", "status")


def derive_employee_id(email: str) -> str:
    return email.strip().lower()


class EmployeeDirectory:
    def __init__(self, store: RecordStore):
        self.store = store

    async def find_employee(self, id_or_email: str) -> dict[str, Any] | None:
        """Match on employee id first, then on (case-insensitive) email."""
        if not id_or_email:
            return None
        employee = await self.store.get_one(EMPLOYEES.name, "employee_id", id_or_email)
        if employee is not None:
            return employee
        wanted = derive_employee_id(id_or_email)
        for row in await self.store.get_all(EMPLOYEES.name):
            if row["employee_id"] == wanted or row["email"].strip().lower() == wanted:
                return row
        return None

    async def get_employee(self, id_or_email: str) -> dict[str, Any]:
        employee = await self.find_employee(id_or_email)
        if employee is None:
            raise NotFoundError(f"Employee not found: {id_or_email}")
        return employee

    async def list_employees(
        self,
        filters: dict[str, Any] | None = None,
        text: str | None = None,
    ) -> list[dict[str, Any]]:
        return await self.store.search(EMPLOYEES.name, filters, text)

    async def add_employee(self, data: dict[str, Any], actor: str) -> dict[str, Any]:
        require_fields(data, REQUIRED_EMPLOYEE_FIELDS)
        employee_id = data.get("employee_id") or derive_employee_id(data["email"])

        if await self.find_employee(employee_id) or await self.find_employee(data["email"]):
            raise DuplicateError(f"Employee already exists: {employee_id}")

        record = {k: data[k] for k in EDITABLE_EMPLOYEE_FIELDS if data.get(k) is not None}
        record["employee_id"] = employee_id
        record.setdefault("status", EmployeeStatus.ACTIVE.value)
        record["assets_assigned"] = await self._count_assigned(employee_id)

        employee = await self.store.insert(EMPLOYEES.name, record, actor)
        logger.info("employee_added", extra={"employee_id": employee_id, "actor": actor})
        return employee

    async def update_employee(self, data: dict[str, Any], actor: str) -> dict[str, Any]:
        require_fields(data, ("employee_id",))
        employee = await self.get_employee(data["employee_id"])
        patch = {k: data[k] for k in EDITABLE_EMPLOYEE_FIELDS if k in data and data[k] is not None}
        if not patch:
            return employee
        return await self.store.update(
            EMPLOYEES.name, "employee_id", employee["employee_id"], patch, actor
        )

    async def upsert_employee(self, data: dict[str, Any], actor: str) -> dict[str, Any]:
        """Return the matching employee, creating one when neither id nor email is known."""
        existing = None
        if data.get("employee_id"):
            existing = await self.find_employee(data["employee_id"])
        if existing is None:
            existing = await self.find_employee(data["email"])
        if existing is not None:
            return existing
        return await self.add_employee(data, actor)

    async def assigned_assets(self, employee_id: str) -> list[dict[str, Any]]:
        return [
            asset
            for asset in await self.store.get_all(ASSETS.name)
            if asset["assigned_to"] == employee_id
            and asset["status"] == AssetStatus.ASSIGNED.value
        ]

    async def _count_assigned(self, employee_id: str) -> int:
        return len(await self.assigned_assets(employee_id))

    async def refresh_assigned_count(self, employee_id: str, actor: str) -> int | None:
        """
        Recompute the cached `assets_assigned` value.

        Returns the new count, or None when the employee has no record yet.
        """
        employee = await self.find_employee(employee_id)
        if employee is None:
            return None
        count = await self._count_assigned(employee["employee_id"])
        if employee["assets_assigned"] != count:
            await self.store.update(
                EMPLOYEES.name, "employee_id", employee["employee_id"],
                {"assets_assigned": count}, actor,
            )
        return count
