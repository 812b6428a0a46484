# api/assets/db_manager.py
"""
Asset registry: intake, edits, hard delete, and the single-asset
assign/return/dispose transitions the workflows build on.
"""
from typing import Any

from api.employees.db_manager import EmployeeDirectory
from core.clock import Clock
from core.errors import (
    ConflictError,
    DuplicateError,
    NotFoundError,
    ValidationError,
    require_fields,
)
from core.logging import get_logger
from db_models import ASSETS, AssetCondition, AssetStatus
from store import AppSettingsStore, RecordStore

logger = get_logger("assets")

REQUIRED_ASSET_FIELDS = (
    "serial_number",
    "category",
    "brand",
    "model",
    "condition",
    "date_received",
)

# Fields a caller may set on add/update; status only through the rules below
EDITABLE_ASSET_FIELDS = (
    "serial_number",
    "category",
    "brand",
    "model",
    "specifications",
    "condition",
    "status",
    "location",
    "date_received",
    "supplier",
    "purchase_price",
    "warranty_expiry",
    "notes",
)

# Statuses reachable only through a workflow
WORKFLOW_STATUSES = (AssetStatus.ASSIGNED.value, AssetStatus.DISPOSED.value)

_CONDITIONS = {c.value for c in AssetCondition}
_STATUSES = {s.value for s in AssetStatus}


def _check_condition(condition: str) -> None:
    if condition not in _CONDITIONS:
        raise ValidationError(f"Invalid condition: {condition}", field="condition")


class AssetRegistry:
    def __init__(
        self,
        store: RecordStore,
        app_settings: AppSettingsStore,
        employees: EmployeeDirectory,
        clock: Clock | None = None,
    ):
        self.store = store
        self.app_settings = app_settings
        self.employees = employees
        self.clock = clock or store.clock

    # ---------- Queries ----------

    async def find_asset(self, tag: str) -> dict[str, Any] | None:
        return await self.store.get_one(ASSETS.name, "asset_tag", tag)

    async def get_asset(self, tag: str) -> dict[str, Any]:
        asset = await self.find_asset(tag)
        if asset is None:
            raise NotFoundError(f"Asset not found: {tag}")
        return asset

    async def list_assets(
        self,
        filters: dict[str, Any] | None = None,
        text: str | None = None,
    ) -> list[dict[str, Any]]:
        return await self.store.search(ASSETS.name, filters, text)

    async def _serial_owner(self, serial_number: str) -> dict[str, Any] | None:
        return await self.store.get_one(ASSETS.name, "serial_number", serial_number)

    # ---------- Administration ----------

    async def add_asset(self, data: dict[str, Any], actor: str) -> dict[str, Any]:
        """
        Register a new asset under a freshly allocated tag.

        Raises:
            ValidationError: a required field is missing, or a bad enum value
            DuplicateError: serial number already registered
        """
        require_fields(data, REQUIRED_ASSET_FIELDS)
        _check_condition(data["condition"])

        if await self._serial_owner(data["serial_number"]) is not None:
            raise DuplicateError(f"Serial number already exists: {data['serial_number']}")

        record = {k: data[k] for k in EDITABLE_ASSET_FIELDS if data.get(k) is not None}
        status = record.get("status") or AssetStatus.AVAILABLE.value
        if status not in _STATUSES:
            raise ValidationError(f"Invalid status: {status}", field="status")
        if status in WORKFLOW_STATUSES:
            raise ConflictError(f"New assets cannot start as {status}")
        record["status"] = status

        record["asset_tag"] = await self.app_settings.allocate_asset_tag()
        asset = await self.store.insert(ASSETS.name, record, actor)
        logger.info("asset_added", extra={"asset_tag": asset["asset_tag"], "actor": actor})
        return asset

    async def update_asset(self, data: dict[str, Any], actor: str) -> dict[str, Any]:
        """
        Edit descriptive fields of an asset.

        Assignment fields are never patched here, and status may not move
        into or out of Assigned/Disposed; those belong to the workflows.
        """
        require_fields(data, ("asset_tag",))
        tag = data["asset_tag"]
        current = await self.get_asset(tag)

        patch = {k: data[k] for k in EDITABLE_ASSET_FIELDS if k in data and data[k] is not None}

        if "condition" in patch:
            _check_condition(patch["condition"])

        new_serial = patch.get("serial_number")
        if new_serial and new_serial != current["serial_number"]:
            owner = await self._serial_owner(new_serial)
            if owner is not None and owner["asset_tag"] != tag:
                raise DuplicateError(f"Serial number already exists: {new_serial}")

        new_status = patch.get("status")
        if new_status and new_status != current["status"]:
            if new_status not in _STATUSES:
                raise ValidationError(f"Invalid status: {new_status}", field="status")
            if current["status"] == AssetStatus.DISPOSED.value:
                raise ConflictError("Disposed assets cannot change status")
            if current["status"] == AssetStatus.ASSIGNED.value:
                raise ConflictError("Assigned assets must be returned before changing status")
            if new_status in WORKFLOW_STATUSES:
                raise ConflictError(f"Status {new_status} can only be set by its workflow")

        if not patch:
            return current
        asset = await self.store.update(ASSETS.name, "asset_tag", tag, patch, actor)
        logger.info("asset_updated", extra={"asset_tag": tag, "fields": sorted(patch), "actor": actor})
        return asset

    async def delete_asset(self, tag: str, actor: str) -> dict[str, Any]:
        asset = await self.get_asset(tag)
        if asset["status"] == AssetStatus.ASSIGNED.value:
            raise ConflictError("Cannot delete an assigned asset")
        removed = await self.store.delete(ASSETS.name, "asset_tag", tag, actor)
        logger.info("asset_deleted", extra={"asset_tag": tag, "actor": actor})
        return removed

    # ---------- Transitions ----------

    async def assign_asset(self, tag: str, employee_id: str, actor: str) -> dict[str, Any]:
        asset = await self.get_asset(tag)
        if asset["status"] != AssetStatus.AVAILABLE.value:
            raise ConflictError("Asset is not available for assignment")

        assigned = await self.store.update(
            ASSETS.name,
            "asset_tag",
            tag,
            {
                "status": AssetStatus.ASSIGNED.value,
                "assigned_to": employee_id,
                "assignment_date": self.clock.now(),
            },
            actor,
        )
        await self._refresh_count(employee_id, actor)
        logger.info("asset_assigned", extra={"asset_tag": tag, "employee_id": employee_id, "actor": actor})
        return assigned

    async def return_asset(
        self,
        tag: str,
        actor: str,
        condition: str | None = None,
    ) -> dict[str, Any]:
        asset = await self.get_asset(tag)
        if asset["status"] != AssetStatus.ASSIGNED.value:
            raise ConflictError("Asset is not currently assigned")

        patch: dict[str, Any] = {
            "status": AssetStatus.AVAILABLE.value,
            "assigned_to": "",
            "assignment_date": None,
        }
        if condition:
            _check_condition(condition)
            patch["condition"] = condition

        returned = await self.store.update(ASSETS.name, "asset_tag", tag, patch, actor)
        if asset["assigned_to"]:
            await self._refresh_count(asset["assigned_to"], actor)
        logger.info("asset_returned", extra={"asset_tag": tag, "actor": actor})
        return returned

    async def dispose_asset(self, tag: str, actor: str) -> dict[str, Any]:
        """Move an asset to the terminal Disposed status."""
        asset = await self.get_asset(tag)
        if asset["status"] == AssetStatus.ASSIGNED.value:
            raise ConflictError("Asset must be returned before disposal")
        if asset["status"] == AssetStatus.DISPOSED.value:
            raise ConflictError("Asset is already disposed")

        disposed = await self.store.update(
            ASSETS.name, "asset_tag", tag, {"status": AssetStatus.DISPOSED.value}, actor
        )
        logger.info("asset_disposed", extra={"asset_tag": tag, "actor": actor})
        return disposed

    async def restore_assignment(self, previous: dict[str, Any], actor: str) -> dict[str, Any]:
        """Put a returned asset back exactly as it was while assigned."""
        restored = await self.store.update(
            ASSETS.name,
            "asset_tag",
            previous["asset_tag"],
            {
                "status": previous["status"],
                "assigned_to": previous["assigned_to"],
                "assignment_date": previous["assignment_date"],
                "condition": previous["condition"],
            },
            actor,
        )
        if previous["assigned_to"]:
            await self._refresh_count(previous["assigned_to"], actor)
        logger.info("asset_assignment_restored", extra={"asset_tag": previous["asset_tag"], "actor": actor})
        return restored

    # ---------- Helpers ----------

    async def _refresh_count(self, employee_id: str, actor: str) -> None:
        # The cached count never decides the outcome of a transition
        try:
            await self.employees.refresh_assigned_count(employee_id, actor)
        except Exception:
            logger.exception("assigned_count_refresh_failed", extra={"employee_id": employee_id})
