# api/accountability/db_manager.py
"""
Accountability workflow: assignment of one asset to one employee, the
employee's signed confirmation, and the return.

    Pending Confirmation --confirm--> Completed --return--> Returned

Submitting writes the form and then assigns the asset; if the assignment
fails the form is deleted again. Returning releases the asset first and
puts it back if the form cannot be closed. Notifications and documents are
best-effort and never change the outcome.
"""
from datetime import datetime, timedelta
from typing import Any

from api.assets.db_manager import AssetRegistry
from api.employees.db_manager import EmployeeDirectory, derive_employee_id
from config import settings as app_config
from core import notifications
from core.clock import Clock, as_utc
from core.compensation import run_compensated
from core.errors import ConflictError, NotFoundError, ValidationError, require_fields
from core.logging import get_logger
from core.records import append_note, unique_record_id
from core.side_effects import SideEffects
from db_models import (
    ACCOUNTABILITY,
    ACTIVE_ACCOUNTABILITY_STATUSES,
    AccountabilityStatus,
    AssetStatus,
)
from store import RecordStore

logger = get_logger("accountability")

REQUIRED_FORM_FIELDS = ("asset_tag", "employee_name", "employee_email", "it_personnel")

FORM_ID_PREFIX = "ACC"

ACCOUNTABILITY_DOCUMENT = "accountability_form"
RETURN_DOCUMENT = "return_form"


class AccountabilityWorkflow:
    def __init__(
        self,
        store: RecordStore,
        assets: AssetRegistry,
        employees: EmployeeDirectory,
        effects: SideEffects,
        clock: Clock | None = None,
        config=app_config,
    ):
        self.store = store
        self.assets = assets
        self.employees = employees
        self.effects = effects
        self.clock = clock or store.clock
        self.config = config

    # ---------- Queries ----------

    async def find_form(self, form_id: str) -> dict[str, Any] | None:
        return await self.store.get_one(ACCOUNTABILITY.name, "form_id", form_id)

    async def get_form(self, form_id: str) -> dict[str, Any]:
        form = await self.find_form(form_id)
        if form is None:
            raise NotFoundError(f"Form not found: {form_id}")
        return form

    async def list_forms(
        self,
        filters: dict[str, Any] | None = None,
        text: str | None = None,
    ) -> list[dict[str, Any]]:
        return await self.store.search(ACCOUNTABILITY.name, filters, text)

    async def forms_for_employee(self, id_or_email: str) -> list[dict[str, Any]]:
        """Forms whose employee id OR email matches, each form once."""
        wanted = id_or_email.strip().lower()
        matches: dict[str, dict[str, Any]] = {}
        for form in await self.store.get_all(ACCOUNTABILITY.name):
            if form["employee_id"].lower() == wanted or form["employee_email"].lower() == wanted:
                matches.setdefault(form["form_id"], form)
        return list(matches.values())

    async def active_form_for_asset(self, asset_tag: str) -> dict[str, Any] | None:
        for form in await self.store.get_all(ACCOUNTABILITY.name):
            if form["asset_tag"] == asset_tag and form["status"] in ACTIVE_ACCOUNTABILITY_STATUSES:
                return form
        return None

    async def overdue_forms(
        self,
        days: int | None = None,
        now: datetime | None = None,
    ) -> list[dict[str, Any]]:
        """Pending forms assigned more than `days` ago (default from config)."""
        threshold = days if days is not None else self.config.ACCOUNTABILITY_OVERDUE_DAYS
        cutoff = (now or self.clock.now()) - timedelta(days=threshold)
        return [
            form
            for form in await self.store.get_all(ACCOUNTABILITY.name)
            if form["status"] == AccountabilityStatus.PENDING_CONFIRMATION.value
            and form["assignment_date"] is not None
            and as_utc(form["assignment_date"]) < cutoff
        ]

    # ---------- Transitions ----------

    async def submit(self, data: dict[str, Any], actor: str) -> dict[str, Any]:
        """
        Create a form in Pending Confirmation and assign the asset.

        Raises:
            ValidationError: required field missing
            NotFoundError: unknown asset
            ConflictError: asset not Available, or already held by a form
            DependencyError: assignment failed for a non-domain reason
        """
        require_fields(data, REQUIRED_FORM_FIELDS)
        tag = data["asset_tag"]

        asset = await self.assets.get_asset(tag)
        if asset["status"] != AssetStatus.AVAILABLE.value:
            raise ConflictError("Asset is not available for assignment")
        active = await self.active_form_for_asset(tag)
        if active is not None:
            raise ConflictError(f"Asset already has an active accountability form: {active['form_id']}")

        existing_employee = await self.employees.find_employee(
            data.get("employee_id") or data["employee_email"]
        )
        if existing_employee is not None:
            employee_id = existing_employee["employee_id"]
        else:
            employee_id = data.get("employee_id") or derive_employee_id(data["employee_email"])

        now = self.clock.now()
        form_id = await unique_record_id(FORM_ID_PREFIX, now, self._form_exists)
        record = {
            "form_id": form_id,
            "asset_tag": tag,
            "employee_id": employee_id,
            "employee_name": data["employee_name"],
            "employee_email": data["employee_email"],
            "department": data.get("department") or "",
            "position": data.get("position") or "",
            "assignment_date": now,
            "it_personnel": data["it_personnel"],
            "it_signature": data.get("it_signature") or "",
            "employee_confirmed": False,
            "status": AccountabilityStatus.PENDING_CONFIRMATION.value,
            "notes": data.get("notes") or "",
        }

        form, assigned_asset = await run_compensated(
            lambda: self.store.insert(ACCOUNTABILITY.name, record, actor),
            lambda form: self.assets.assign_asset(tag, employee_id, actor),
            lambda form: self.store.delete(ACCOUNTABILITY.name, "form_id", form["form_id"], actor),
            operation="accountability_submit",
        )
        logger.info(
            "accountability_submitted",
            extra={"form_id": form_id, "asset_tag": tag, "employee_id": employee_id, "actor": actor},
        )

        if existing_employee is None:
            await self._register_employee(data, employee_id, actor)

        await self.effects.notify(
            "assignment_request", notifications.assignment_request(form, assigned_asset)
        )
        return form

    async def confirm(
        self,
        form_id: str,
        signature: str,
        notes: str | None,
        actor: str,
    ) -> dict[str, Any]:
        form = await self.get_form(form_id)
        if form["status"] != AccountabilityStatus.PENDING_CONFIRMATION.value:
            raise ConflictError("Form is not pending confirmation")
        if not signature:
            raise ValidationError.missing("employee_signature")

        confirmed = await self.store.update(
            ACCOUNTABILITY.name,
            "form_id",
            form_id,
            {
                "employee_confirmed": True,
                "employee_signature": signature,
                "confirmation_date": self.clock.now(),
                "status": AccountabilityStatus.COMPLETED.value,
                "notes": append_note(form["notes"], notes, "Employee"),
            },
            actor,
        )
        logger.info("accountability_confirmed", extra={"form_id": form_id, "actor": actor})

        asset = await self.assets.find_asset(confirmed["asset_tag"])
        confirmed = await self._attach_document(confirmed, ACCOUNTABILITY_DOCUMENT, asset, actor)
        await self.effects.notify(
            "confirmation_receipt",
            notifications.confirmation_receipt(confirmed, asset, cc=self.config.IT_NOTIFICATION_EMAIL),
        )
        return confirmed

    async def process_return(
        self,
        form_id: str,
        return_data: dict[str, Any],
        actor: str,
    ) -> dict[str, Any]:
        """
        Release the asset and close the form.

        The asset is returned first; if the form cannot be closed the asset
        is put back as it was, so the form can be retried.
        """
        form = await self.get_form(form_id)
        if form["status"] != AccountabilityStatus.COMPLETED.value:
            raise ConflictError("Form is not completed")

        condition = return_data.get("condition")
        held = await self.assets.get_asset(form["asset_tag"])

        async def close_form(asset):
            return await self.store.update(
                ACCOUNTABILITY.name,
                "form_id",
                form_id,
                {
                    "return_date": self.clock.now(),
                    "status": AccountabilityStatus.RETURNED.value,
                    "return_condition": condition or "",
                    "returned_to": return_data.get("received_by") or actor,
                    "return_notes": return_data.get("notes") or "",
                },
                actor,
            )

        asset, returned = await run_compensated(
            lambda: self.assets.return_asset(form["asset_tag"], actor, condition=condition),
            close_form,
            lambda asset: self.assets.restore_assignment(held, actor),
            operation="accountability_return",
        )
        logger.info("accountability_returned", extra={"form_id": form_id, "asset_tag": form["asset_tag"], "actor": actor})

        returned = await self._attach_document(returned, RETURN_DOCUMENT, asset, actor)
        await self.effects.notify(
            "return_receipt",
            notifications.return_receipt(returned, asset, cc=self.config.IT_NOTIFICATION_EMAIL),
        )
        return returned

    async def send_overdue_reminders(self, days: int | None = None) -> list[str]:
        """Resend the original confirmation request for each overdue form."""
        reminded = []
        for form in await self.overdue_forms(days):
            asset = await self.assets.find_asset(form["asset_tag"])
            if await self.effects.notify("assignment_reminder", notifications.assignment_request(form, asset)):
                reminded.append(form["form_id"])
        logger.info("accountability_reminders_sent", extra={"count": len(reminded)})
        return reminded

    # ---------- Helpers ----------

    async def _form_exists(self, form_id: str) -> bool:
        return await self.find_form(form_id) is not None

    async def _register_employee(self, data: dict[str, Any], employee_id: str, actor: str) -> None:
        """Create the employee after a successful assignment; the form stands either way."""
        try:
            await self.employees.upsert_employee(
                {
                    "employee_id": employee_id,
                    "name": data["employee_name"],
                    "email": data["employee_email"],
                    "department": data.get("department"),
                    "position": data.get("position"),
                },
                actor,
            )
            await self.employees.refresh_assigned_count(employee_id, actor)
        except Exception:
            logger.exception("employee_upsert_failed", extra={"employee_id": employee_id})

    async def _attach_document(
        self,
        form: dict[str, Any],
        template_kind: str,
        asset: dict[str, Any] | None,
        actor: str,
    ) -> dict[str, Any]:
        reference = await self.effects.render(template_kind, form, asset)
        if not reference:
            return form
        try:
            return await self.store.update(
                ACCOUNTABILITY.name, "form_id", form["form_id"], {"document_ref": reference}, actor
            )
        except Exception:
            logger.exception("document_link_failed", extra={"form_id": form["form_id"]})
            return form
