# api/disposal/views.py
"""
Disposal workflow endpoints: request, decide, cancel, and queries.
"""
from fastapi import APIRouter, Query, status

from api.common.models import ReminderResult, ResultEnvelope
from api.common.responses import ok
from core.deps import Actor, ServicesDep
from db_models import DisposalStatus
from .models import DisposalCancel, DisposalDecision, DisposalSubmit

router = APIRouter(prefix="/disposals", tags=["disposals"])


@router.post(
    "",
    response_model=ResultEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Request disposal of an asset",
)
async def submit_disposal_endpoint(
    payload: DisposalSubmit,
    actor: Actor,
    services: ServicesDep,
) -> ResultEnvelope:
    disposal = await services.disposal.submit(payload.model_dump(exclude_none=True), actor)
    return ok(f"Disposal request {disposal['disposal_id']} submitted", disposal)


@router.get("", response_model=ResultEnvelope, summary="List or search disposal requests")
async def list_disposals_endpoint(
    services: ServicesDep,
    status_filter: DisposalStatus | None = Query(None, alias="status"),
    approver_email: str | None = Query(None),
    asset_tag: str | None = Query(None),
    q: str | None = Query(None),
) -> ResultEnvelope:
    if approver_email and not (status_filter or asset_tag or q):
        disposals = await services.disposal.disposals_for_approver(approver_email)
    elif status_filter and not (approver_email or asset_tag or q):
        disposals = await services.disposal.disposals_by_status(status_filter.value)
    else:
        disposals = await services.disposal.list_disposals(
            {
                "status": status_filter.value if status_filter else None,
                "approver_email": approver_email,
                "asset_tag": asset_tag,
            },
            q,
        )
    return ok(f"{len(disposals)} disposal(s) found", disposals)


@router.get("/overdue", response_model=ResultEnvelope, summary="Requests awaiting approval too long")
async def overdue_disposals_endpoint(
    services: ServicesDep,
    days: int | None = Query(None, ge=0),
) -> ResultEnvelope:
    disposals = await services.disposal.overdue_disposals(days)
    return ok(f"{len(disposals)} overdue disposal(s)", disposals)


@router.post("/reminders", response_model=ResultEnvelope, summary="Resend overdue approval requests")
async def send_reminders_endpoint(
    services: ServicesDep,
    days: int | None = Query(None, ge=0),
) -> ResultEnvelope:
    reminded = await services.disposal.send_overdue_reminders(days)
    return ok(f"{len(reminded)} reminder(s) sent", ReminderResult(sent=len(reminded), ids=reminded))


@router.get("/{disposal_id}", response_model=ResultEnvelope, summary="Get disposal request")
async def get_disposal_endpoint(disposal_id: str, services: ServicesDep) -> ResultEnvelope:
    disposal = await services.disposal.get_disposal(disposal_id)
    return ok("Disposal found", disposal)


@router.post(
    "/{disposal_id}/decision",
    response_model=ResultEnvelope,
    summary="Approve or reject a disposal request",
)
async def decide_disposal_endpoint(
    disposal_id: str,
    payload: DisposalDecision,
    actor: Actor,
    services: ServicesDep,
) -> ResultEnvelope:
    """
    Approval disposes the asset. If the asset can no longer be disposed, the
    request goes back to Pending Approval and the error is returned.
    """
    disposal = await services.disposal.decide(
        disposal_id, payload.approver_signature, payload.notes, payload.approved, actor
    )
    return ok(f"Disposal {disposal_id} {disposal['status'].lower()}", disposal)


@router.post(
    "/{disposal_id}/cancel",
    response_model=ResultEnvelope,
    summary="Cancel a pending disposal request",
)
async def cancel_disposal_endpoint(
    disposal_id: str,
    payload: DisposalCancel,
    actor: Actor,
    services: ServicesDep,
) -> ResultEnvelope:
    disposal = await services.disposal.cancel(disposal_id, payload.reason, actor)
    return ok(f"Disposal {disposal_id} cancelled", disposal)
