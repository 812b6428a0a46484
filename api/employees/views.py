# api/employees/views.py
from fastapi import APIRouter, Query, status

from api.common.models import ResultEnvelope
from api.common.responses import ok
from core.deps import Actor, ServicesDep
from .models import EmployeeCreate, EmployeeUpdate

router = APIRouter(prefix="/employees", tags=["employees"])


@router.post(
    "",
    response_model=ResultEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Add an employee",
)
async def add_employee_endpoint(
    payload: EmployeeCreate,
    actor: Actor,
    services: ServicesDep,
) -> ResultEnvelope:
    employee = await services.employees.add_employee(payload.model_dump(exclude_none=True), actor)
    return ok(f"Employee {employee['employee_id']} added", employee)


@router.get("", response_model=ResultEnvelope, summary="List or search employees")
async def list_employees_endpoint(
    services: ServicesDep,
    department: str | None = Query(None),
    status_filter: str | None = Query(None, alias="status"),
    q: str | None = Query(None),
) -> ResultEnvelope:
    employees = await services.employees.list_employees(
        {"department": department, "status": status_filter}, q
    )
    return ok(f"{len(employees)} employee(s) found", employees)


@router.get("/{id_or_email}", response_model=ResultEnvelope, summary="Get employee by id or email")
async def get_employee_endpoint(id_or_email: str, services: ServicesDep) -> ResultEnvelope:
    employee = await services.employees.get_employee(id_or_email)
    return ok("Employee found", employee)


@router.get(
    "/{id_or_email}/assets",
    response_model=ResultEnvelope,
    summary="Assets currently assigned to an employee",
)
async def employee_assets_endpoint(id_or_email: str, services: ServicesDep) -> ResultEnvelope:
    employee = await services.employees.get_employee(id_or_email)
    assets = await services.employees.assigned_assets(employee["employee_id"])
    return ok(f"{len(assets)} asset(s) assigned", assets)


@router.patch("/{employee_id}", response_model=ResultEnvelope, summary="Edit employee details")
async def update_employee_endpoint(
    employee_id: str,
    payload: EmployeeUpdate,
    actor: Actor,
    services: ServicesDep,
) -> ResultEnvelope:
    data = payload.model_dump(exclude_none=True)
    data["employee_id"] = employee_id
    employee = await services.employees.update_employee(data, actor)
    return ok(f"Employee {employee['employee_id']} updated", employee)
