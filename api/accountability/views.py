# api/accountability/views.py
"""
Accountability workflow endpoints: submit, confirm, return, and queries.
"""
from fastapi import APIRouter, Query, status

from api.common.models import ReminderResult, ResultEnvelope
from api.common.responses import ok
from core.deps import Actor, ServicesDep
from db_models import AccountabilityStatus
from .models import AccountabilityConfirm, AccountabilityReturn, AccountabilitySubmit

router = APIRouter(prefix="/accountability", tags=["accountability"])


@router.post(
    "",
    response_model=ResultEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Assign an asset and open an accountability form",
)
async def submit_form_endpoint(
    payload: AccountabilitySubmit,
    actor: Actor,
    services: ServicesDep,
) -> ResultEnvelope:
    """
    Creates the form in Pending Confirmation and assigns the asset. If the
    assignment fails the form is removed and the assignment error returned.
    """
    form = await services.accountability.submit(payload.model_dump(exclude_none=True), actor)
    return ok(f"Accountability form {form['form_id']} submitted", form)


@router.get("", response_model=ResultEnvelope, summary="List or search accountability forms")
async def list_forms_endpoint(
    services: ServicesDep,
    status_filter: AccountabilityStatus | None = Query(None, alias="status"),
    asset_tag: str | None = Query(None),
    it_personnel: str | None = Query(None),
    q: str | None = Query(None),
) -> ResultEnvelope:
    forms = await services.accountability.list_forms(
        {
            "status": status_filter.value if status_filter else None,
            "asset_tag": asset_tag,
            "it_personnel": it_personnel,
        },
        q,
    )
    return ok(f"{len(forms)} form(s) found", forms)


@router.get("/overdue", response_model=ResultEnvelope, summary="Forms awaiting confirmation too long")
async def overdue_forms_endpoint(
    services: ServicesDep,
    days: int | None = Query(None, ge=0),
) -> ResultEnvelope:
    forms = await services.accountability.overdue_forms(days)
    return ok(f"{len(forms)} overdue form(s)", forms)


@router.post("/reminders", response_model=ResultEnvelope, summary="Resend overdue confirmation requests")
async def send_reminders_endpoint(
    services: ServicesDep,
    days: int | None = Query(None, ge=0),
) -> ResultEnvelope:
    reminded = await services.accountability.send_overdue_reminders(days)
    return ok(f"{len(reminded)} reminder(s) sent", ReminderResult(sent=len(reminded), ids=reminded))


@router.get(
    "/employee/{id_or_email}",
    response_model=ResultEnvelope,
    summary="Forms for an employee (matched by id or email)",
)
async def employee_forms_endpoint(id_or_email: str, services: ServicesDep) -> ResultEnvelope:
    forms = await services.accountability.forms_for_employee(id_or_email)
    return ok(f"{len(forms)} form(s) found", forms)


@router.get("/{form_id}", response_model=ResultEnvelope, summary="Get accountability form")
async def get_form_endpoint(form_id: str, services: ServicesDep) -> ResultEnvelope:
    form = await services.accountability.get_form(form_id)
    return ok("Form found", form)


@router.post(
    "/{form_id}/confirm",
    response_model=ResultEnvelope,
    summary="Employee confirms receipt",
)
async def confirm_form_endpoint(
    form_id: str,
    payload: AccountabilityConfirm,
    actor: Actor,
    services: ServicesDep,
) -> ResultEnvelope:
    form = await services.accountability.confirm(form_id, payload.signature, payload.notes, actor)
    return ok(f"Accountability form {form_id} confirmed", form)


@router.post(
    "/{form_id}/return",
    response_model=ResultEnvelope,
    summary="Process the return of the asset",
)
async def return_form_endpoint(
    form_id: str,
    payload: AccountabilityReturn,
    actor: Actor,
    services: ServicesDep,
) -> ResultEnvelope:
    form = await services.accountability.process_return(
        form_id, payload.model_dump(exclude_none=True), actor
    )
    return ok(f"Asset {form['asset_tag']} returned", form)
