# api/disposal/db_manager.py
"""
Disposal workflow: a request to retire an asset, the approver's decision,
and the retirement itself.

    Pending Approval --approve--> Approved   (asset becomes Disposed)
    Pending Approval --reject---> Rejected
    Pending Approval --cancel---> Cancelled

Approval writes the decision first and then disposes the asset; if the
asset can no longer be disposed the decision is reverted to Pending
Approval.
"""
from datetime import datetime, timedelta
from typing import Any

from api.assets.db_manager import AssetRegistry
from config import settings as app_config
from core import notifications
from core.clock import Clock, as_utc
from core.compensation import run_compensated
from core.errors import ConflictError, NotFoundError, ValidationError, require_fields
from core.logging import get_logger
from core.records import append_note, unique_record_id
from core.side_effects import SideEffects
from db_models import DISPOSALS, AssetStatus, DisposalMethod, DisposalStatus
from store import RecordStore

logger = get_logger("disposal")

REQUIRED_DISPOSAL_FIELDS = (
    "asset_tag",
    "method",
    "reason",
    "it_personnel",
    "approver_name",
    "approver_email",
)

DISPOSAL_ID_PREFIX = "DSP"
DISPOSAL_CERTIFICATE = "disposal_certificate"

_METHODS = {m.value for m in DisposalMethod}


class DisposalWorkflow:
    def __init__(
        self,
        store: RecordStore,
        assets: AssetRegistry,
        effects: SideEffects,
        clock: Clock | None = None,
        config=app_config,
    ):
        self.store = store
        self.assets = assets
        self.effects = effects
        self.clock = clock or store.clock
        self.config = config

    # ---------- Queries ----------

    async def find_disposal(self, disposal_id: str) -> dict[str, Any] | None:
        return await self.store.get_one(DISPOSALS.name, "disposal_id", disposal_id)

    async def get_disposal(self, disposal_id: str) -> dict[str, Any]:
        disposal = await self.find_disposal(disposal_id)
        if disposal is None:
            raise NotFoundError(f"Disposal not found: {disposal_id}")
        return disposal

    async def list_disposals(
        self,
        filters: dict[str, Any] | None = None,
        text: str | None = None,
    ) -> list[dict[str, Any]]:
        return await self.store.search(DISPOSALS.name, filters, text)

    async def disposals_by_status(self, status: str) -> list[dict[str, Any]]:
        return [d for d in await self.store.get_all(DISPOSALS.name) if d["status"] == status]

    async def disposals_for_approver(self, approver_email: str) -> list[dict[str, Any]]:
        wanted = approver_email.strip().lower()
        return [
            d for d in await self.store.get_all(DISPOSALS.name)
            if d["approver_email"].strip().lower() == wanted
        ]

    async def pending_disposal_for_asset(self, asset_tag: str) -> dict[str, Any] | None:
        for disposal in await self.disposals_by_status(DisposalStatus.PENDING_APPROVAL.value):
            if disposal["asset_tag"] == asset_tag:
                return disposal
        return None

    async def overdue_disposals(
        self,
        days: int | None = None,
        now: datetime | None = None,
    ) -> list[dict[str, Any]]:
        """Requests still pending approval more than `days` after submission."""
        threshold = days if days is not None else self.config.DISPOSAL_OVERDUE_DAYS
        cutoff = (now or self.clock.now()) - timedelta(days=threshold)
        return [
            d
            for d in await self.disposals_by_status(DisposalStatus.PENDING_APPROVAL.value)
            if d["created_at"] is not None and as_utc(d["created_at"]) < cutoff
        ]

    # ---------- Transitions ----------

    async def submit(self, data: dict[str, Any], actor: str) -> dict[str, Any]:
        """
        Record a disposal request in Pending Approval and ask the approver.

        Raises:
            ValidationError: required field missing or unknown method
            NotFoundError: unknown asset
            ConflictError: asset assigned, already disposed, or already pending
        """
        require_fields(data, REQUIRED_DISPOSAL_FIELDS)
        if data["method"] not in _METHODS:
            raise ValidationError(f"Invalid disposal method: {data['method']}", field="method")

        tag = data["asset_tag"]
        asset = await self.assets.get_asset(tag)
        if asset["status"] == AssetStatus.ASSIGNED.value:
            raise ConflictError("Asset must be returned before disposal")
        if asset["status"] == AssetStatus.DISPOSED.value:
            raise ConflictError("Asset is already disposed")
        pending = await self.pending_disposal_for_asset(tag)
        if pending is not None:
            raise ConflictError(f"Asset already has a pending disposal request: {pending['disposal_id']}")

        disposal_id = await unique_record_id(DISPOSAL_ID_PREFIX, self.clock.now(), self._disposal_exists)
        record = {
            "disposal_id": disposal_id,
            "asset_tag": tag,
            "method": data["method"],
            "disposal_date": data.get("disposal_date") or self.clock.today(),
            "reason": data["reason"],
            "requested_by": data["it_personnel"],
            "requester_email": data.get("requester_email") or "",
            "requester_signature": data.get("it_signature") or "",
            "approver_name": data["approver_name"],
            "approver_email": data["approver_email"],
            "estimated_value": data.get("estimated_value"),
            "status": DisposalStatus.PENDING_APPROVAL.value,
            "notes": data.get("notes") or "",
        }
        disposal = await self.store.insert(DISPOSALS.name, record, actor)
        logger.info("disposal_submitted", extra={"disposal_id": disposal_id, "asset_tag": tag, "actor": actor})

        await self.effects.notify("approval_request", notifications.approval_request(disposal, asset))
        return disposal

    async def decide(
        self,
        disposal_id: str,
        approver_signature: str,
        notes: str | None,
        approved: bool,
        actor: str,
    ) -> dict[str, Any]:
        """
        Approve or reject a pending request.

        On approval the asset is moved to Disposed; if that fails the
        decision is reverted and the asset error is raised.
        """
        disposal = await self.get_disposal(disposal_id)
        if disposal["status"] != DisposalStatus.PENDING_APPROVAL.value:
            raise ConflictError("Disposal is not pending approval")
        if not approver_signature:
            raise ValidationError.missing("approver_signature")

        status = DisposalStatus.APPROVED if approved else DisposalStatus.REJECTED
        decision = {
            "approver_signature": approver_signature,
            "approval_date": self.clock.now(),
            "status": status.value,
            "notes": append_note(disposal["notes"], notes, "Approver"),
        }

        async def record_decision():
            return await self.store.update(DISPOSALS.name, "disposal_id", disposal_id, decision, actor)

        if approved:
            decided, asset = await run_compensated(
                record_decision,
                lambda decided: self.assets.dispose_asset(disposal["asset_tag"], actor),
                lambda decided: self._revert_decision(disposal, actor),
                operation="disposal_approval",
            )
        else:
            decided = await record_decision()
            asset = await self.assets.find_asset(disposal["asset_tag"])
        logger.info(
            "disposal_decided",
            extra={"disposal_id": disposal_id, "status": status.value, "actor": actor},
        )

        if approved:
            decided = await self._attach_certificate(decided, asset, actor)
        await self.effects.notify("disposal_status", notifications.disposal_status(decided, asset))
        return decided

    async def cancel(self, disposal_id: str, reason: str | None, actor: str) -> dict[str, Any]:
        disposal = await self.get_disposal(disposal_id)
        if disposal["status"] != DisposalStatus.PENDING_APPROVAL.value:
            raise ConflictError("Disposal is not pending approval")

        cancelled = await self.store.update(
            DISPOSALS.name,
            "disposal_id",
            disposal_id,
            {
                "status": DisposalStatus.CANCELLED.value,
                "notes": append_note(disposal["notes"], reason, "Cancelled"),
            },
            actor,
        )
        logger.info("disposal_cancelled", extra={"disposal_id": disposal_id, "actor": actor})

        await self.effects.notify(
            "disposal_cancelled", notifications.disposal_cancelled(cancelled, reason or "")
        )
        return cancelled

    async def send_overdue_reminders(self, days: int | None = None) -> list[str]:
        """Resend the approval request, unchanged, for each overdue disposal."""
        reminded = []
        for disposal in await self.overdue_disposals(days):
            asset = await self.assets.find_asset(disposal["asset_tag"])
            if await self.effects.notify("approval_reminder", notifications.approval_request(disposal, asset)):
                reminded.append(disposal["disposal_id"])
        logger.info("disposal_reminders_sent", extra={"count": len(reminded)})
        return reminded

    # ---------- Helpers ----------

    async def _disposal_exists(self, disposal_id: str) -> bool:
        return await self.find_disposal(disposal_id) is not None

    async def _revert_decision(self, original: dict[str, Any], actor: str) -> dict[str, Any]:
        return await self.store.update(
            DISPOSALS.name,
            "disposal_id",
            original["disposal_id"],
            {
                "approver_signature": "",
                "approval_date": None,
                "status": DisposalStatus.PENDING_APPROVAL.value,
                "notes": original["notes"],
            },
            actor,
        )

    async def _attach_certificate(
        self,
        disposal: dict[str, Any],
        asset: dict[str, Any] | None,
        actor: str,
    ) -> dict[str, Any]:
        reference = await self.effects.render(DISPOSAL_CERTIFICATE, disposal, asset)
        if not reference:
            return disposal
        try:
            return await self.store.update(
                DISPOSALS.name, "disposal_id", disposal["disposal_id"], {"document_ref": reference}, actor
            )
        except Exception:
            logger.exception("document_link_failed", extra={"disposal_id": disposal["disposal_id"]})
            return disposal
