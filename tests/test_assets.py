import pytest

from core.errors import ConflictError, DuplicateError, NotFoundError, ValidationError

ADMIN = "it.admin@co.com"


@pytest.mark.anyio
async def test_add_asset_generates_sequential_tags(services, laptop_data):
    first = await services.assets.add_asset(laptop_data, ADMIN)
    second = await services.assets.add_asset({**laptop_data, "serial_number": "SN2"}, ADMIN)

    assert first["asset_tag"] == "IT-1000"
    assert first["status"] == "Available"
    assert first["assigned_to"] == ""
    assert second["asset_tag"] == "IT-1001"
    assert await services.app_settings.get("next_asset_tag") == "1002"


@pytest.mark.anyio
async def test_add_asset_reports_first_missing_field(services, laptop_data):
    data = {k: v for k, v in laptop_data.items() if k not in ("brand", "model")}

    with pytest.raises(ValidationError) as exc_info:
        await services.assets.add_asset(data, ADMIN)

    assert exc_info.value.field == "brand"
    assert str(exc_info.value) == "Missing required field: brand"
    assert await services.store.get_all("assets") == []


@pytest.mark.anyio
async def test_add_asset_rejects_blank_and_invalid_values(services, laptop_data):
    with pytest.raises(ValidationError, match="serial_number"):
        await services.assets.add_asset({**laptop_data, "serial_number": "  "}, ADMIN)
    with pytest.raises(ValidationError, match="Invalid condition"):
        await services.assets.add_asset({**laptop_data, "condition": "Shiny"}, ADMIN)
    with pytest.raises(ConflictError):
        await services.assets.add_asset({**laptop_data, "status": "Assigned"}, ADMIN)


@pytest.mark.anyio
async def test_add_asset_rejects_duplicate_serial(services, laptop, laptop_data):
    with pytest.raises(DuplicateError, match="SN1"):
        await services.assets.add_asset(laptop_data, ADMIN)

    assert len(await services.store.get_all("assets")) == 1


@pytest.mark.anyio
async def test_update_asset_requires_existing_tag(services):
    with pytest.raises(ValidationError, match="asset_tag"):
        await services.assets.update_asset({"location": "Lab"}, ADMIN)
    with pytest.raises(NotFoundError, match="IT-4040"):
        await services.assets.update_asset({"asset_tag": "IT-4040", "location": "Lab"}, ADMIN)


@pytest.mark.anyio
async def test_update_asset_serial_uniqueness_excludes_itself(services, laptop, laptop_data):
    other = await services.assets.add_asset({**laptop_data, "serial_number": "SN2"}, ADMIN)

    same = await services.assets.update_asset(
        {"asset_tag": laptop["asset_tag"], "serial_number": "SN1", "location": "Lab"}, ADMIN
    )
    assert same["location"] == "Lab"

    with pytest.raises(DuplicateError):
        await services.assets.update_asset(
            {"asset_tag": other["asset_tag"], "serial_number": "SN1"}, ADMIN
        )


@pytest.mark.anyio
async def test_update_asset_keeps_workflow_statuses_out_of_reach(services, laptop):
    tag = laptop["asset_tag"]

    with pytest.raises(ConflictError):
        await services.assets.update_asset({"asset_tag": tag, "status": "Assigned"}, ADMIN)
    with pytest.raises(ConflictError):
        await services.assets.update_asset({"asset_tag": tag, "status": "Disposed"}, ADMIN)

    updated = await services.assets.update_asset(
        {"asset_tag": tag, "status": "Under Maintenance", "assigned_to": "someone"}, ADMIN
    )
    assert updated["status"] == "Under Maintenance"
    assert updated["assigned_to"] == ""


@pytest.mark.anyio
async def test_disposed_asset_status_is_terminal(services, laptop):
    tag = laptop["asset_tag"]
    await services.assets.dispose_asset(tag, ADMIN)

    with pytest.raises(ConflictError):
        await services.assets.update_asset({"asset_tag": tag, "status": "Available"}, ADMIN)
    with pytest.raises(ConflictError):
        await services.assets.assign_asset(tag, "e@co.com", ADMIN)
    with pytest.raises(ConflictError, match="already disposed"):
        await services.assets.dispose_asset(tag, ADMIN)


@pytest.mark.anyio
async def test_assign_and_return_asset(services, laptop, clock):
    tag = laptop["asset_tag"]
    await services.employees.add_employee({"name": "Erin Cole", "email": "e@co.com"}, ADMIN)

    assigned = await services.assets.assign_asset(tag, "e@co.com", ADMIN)

    assert assigned["status"] == "Assigned"
    assert assigned["assigned_to"] == "e@co.com"
    assert assigned["assignment_date"] is not None
    assert (await services.employees.get_employee("e@co.com"))["assets_assigned"] == 1

    returned = await services.assets.return_asset(tag, ADMIN, condition="Fair")

    assert returned["status"] == "Available"
    assert returned["assigned_to"] == ""
    assert returned["assignment_date"] is None
    assert returned["condition"] == "Fair"
    assert (await services.employees.get_employee("e@co.com"))["assets_assigned"] == 0


@pytest.mark.anyio
async def test_assign_requires_available_asset(services, laptop):
    tag = laptop["asset_tag"]
    await services.assets.assign_asset(tag, "e@co.com", ADMIN)

    with pytest.raises(ConflictError, match="not available"):
        await services.assets.assign_asset(tag, "f@co.com", ADMIN)
    with pytest.raises(NotFoundError):
        await services.assets.assign_asset("IT-4040", "f@co.com", ADMIN)


@pytest.mark.anyio
async def test_return_requires_assigned_asset(services, laptop):
    with pytest.raises(ConflictError, match="not currently assigned"):
        await services.assets.return_asset(laptop["asset_tag"], ADMIN)


@pytest.mark.anyio
async def test_delete_blocked_while_assigned(services, laptop):
    tag = laptop["asset_tag"]
    await services.assets.assign_asset(tag, "e@co.com", ADMIN)

    with pytest.raises(ConflictError):
        await services.assets.delete_asset(tag, ADMIN)

    await services.assets.return_asset(tag, ADMIN)
    removed = await services.assets.delete_asset(tag, ADMIN)
    assert removed["asset_tag"] == tag
    assert await services.assets.find_asset(tag) is None


@pytest.mark.anyio
async def test_dispose_requires_return_first(services, laptop):
    await services.assets.assign_asset(laptop["asset_tag"], "e@co.com", ADMIN)

    with pytest.raises(ConflictError, match="returned before disposal"):
        await services.assets.dispose_asset(laptop["asset_tag"], ADMIN)


@pytest.mark.anyio
async def test_employee_id_derived_from_email(services):
    employee = await services.employees.add_employee({"name": "Sam", "email": "Sam.Ortiz@Co.com"}, ADMIN)

    assert employee["employee_id"] == "sam.ortiz@co.com"
    assert employee["status"] == "Active"
    assert (await services.employees.get_employee("SAM.ORTIZ@co.com"))["name"] == "Sam"
    with pytest.raises(DuplicateError):
        await services.employees.add_employee({"name": "Sam 2", "email": "sam.ortiz@co.com"}, ADMIN)
