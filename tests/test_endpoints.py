import pytest

LAPTOP = {
    "serial_number": "SN-HTTP-1",
    "category": "Laptop",
    "brand": "Lenovo",
    "model": "T14",
    "condition": "New",
    "date_received": "2024-04-02",
    "location": "HQ Store Room",
}

FORM = {
    "employee_name": "Erin Cole",
    "employee_email": "e@co.com",
    "department": "Finance",
    "it_personnel": "it.admin@co.com",
    "it_signature": "data:image/png;base64,SIGIT",
}

DISPOSAL = {
    "method": "Donation",
    "reason": "Replaced by newer model",
    "it_personnel": "it.admin@co.com",
    "requester_email": "it.admin@co.com",
    "approver_name": "Morgan Lee",
    "approver_email": "approver@co.com",
}


async def create_asset(client, **overrides):
    resp = await client.post("/api/v1/assets", json={**LAPTOP, **overrides})
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


@pytest.mark.anyio
async def test_health(async_client):
    resp = await async_client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "healthy"}


@pytest.mark.anyio
async def test_create_asset_returns_envelope(async_client):
    """New assets get the next tag and are stamped with the caller"""
    resp = await async_client.post(
        "/api/v1/assets",
        json=LAPTOP,
        headers={"X-Authenticated-User": "it.admin@co.com"},
    )
    assert resp.status_code == 201, resp.text
    body = resp.json()
    assert body["success"] is True
    assert body["message"] == "Asset IT-1000 added"
    asset = body["data"]
    assert asset["asset_tag"] == "IT-1000"
    assert asset["status"] == "Available"
    assert asset["date_received"] == "2024-04-02"
    assert asset["created_by"] == "it.admin@co.com"


@pytest.mark.anyio
async def test_actor_defaults_to_system(async_client):
    asset = await create_asset(async_client)
    assert asset["created_by"] == "system"


@pytest.mark.anyio
async def test_missing_field_is_400(async_client):
    payload = dict(LAPTOP)
    del payload["model"]
    resp = await async_client.post("/api/v1/assets", json=payload)
    assert resp.status_code == 400
    assert resp.json() == {
        "success": False,
        "message": "Missing required field: model",
        "data": None,
    }


@pytest.mark.anyio
async def test_malformed_payload_is_400(async_client):
    resp = await async_client.post("/api/v1/assets", json={**LAPTOP, "condition": "Shiny"})
    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert body["message"].startswith("Invalid field: condition")


@pytest.mark.anyio
async def test_duplicate_serial_is_409(async_client):
    await create_asset(async_client)
    resp = await async_client.post("/api/v1/assets", json=LAPTOP)
    assert resp.status_code == 409
    assert resp.json()["message"] == "Serial number already exists: SN-HTTP-1"


@pytest.mark.anyio
async def test_unknown_asset_is_404(async_client):
    resp = await async_client.get("/api/v1/assets/IT-0001")
    assert resp.status_code == 404
    assert resp.json()["message"] == "Asset not found: IT-0001"


@pytest.mark.anyio
async def test_list_and_search_assets(async_client):
    await create_asset(async_client)
    await create_asset(async_client, serial_number="SN-HTTP-2", category="Monitor", brand="Dell")

    resp = await async_client.get("/api/v1/assets", params={"category": "monitor"})
    assert resp.status_code == 200
    assert [a["serial_number"] for a in resp.json()["data"]] == ["SN-HTTP-2"]

    resp = await async_client.get("/api/v1/assets", params={"q": "lenovo"})
    assert [a["serial_number"] for a in resp.json()["data"]] == ["SN-HTTP-1"]

    resp = await async_client.get("/api/v1/assets", params={"status": "Available"})
    assert len(resp.json()["data"]) == 2


@pytest.mark.anyio
async def test_update_and_delete_asset(async_client):
    asset = await create_asset(async_client)
    tag = asset["asset_tag"]

    resp = await async_client.patch(f"/api/v1/assets/{tag}", json={"location": "Floor 3"})
    assert resp.status_code == 200, resp.text
    assert resp.json()["data"]["location"] == "Floor 3"
    assert resp.json()["data"]["serial_number"] == "SN-HTTP-1"

    resp = await async_client.patch(f"/api/v1/assets/{tag}", json={"status": "Disposed"})
    assert resp.status_code == 409

    resp = await async_client.delete(f"/api/v1/assets/{tag}")
    assert resp.status_code == 200
    assert (await async_client.get(f"/api/v1/assets/{tag}")).status_code == 404


@pytest.mark.anyio
async def test_employee_endpoints(async_client):
    resp = await async_client.post(
        "/api/v1/employees",
        json={"name": "Sam Ortiz", "email": "Sam.Ortiz@co.com", "department": "Ops"},
    )
    assert resp.status_code == 201, resp.text
    assert resp.json()["data"]["employee_id"] == "sam.ortiz@co.com"

    resp = await async_client.post(
        "/api/v1/employees", json={"name": "Sam Ortiz", "email": "sam.ortiz@co.com"}
    )
    assert resp.status_code == 409

    resp = await async_client.get("/api/v1/employees/SAM.ORTIZ@co.com")
    assert resp.status_code == 200
    assert resp.json()["data"]["assets_assigned"] == 0

    resp = await async_client.patch("/api/v1/employees/sam.ortiz@co.com", json={"position": "Lead"})
    assert resp.status_code == 200, resp.text
    assert resp.json()["data"]["position"] == "Lead"

    assert (await async_client.get("/api/v1/employees/nobody@co.com")).status_code == 404


@pytest.mark.anyio
async def test_accountability_flow_over_http(async_client, notifier):
    """Submit, confirm, and return through the API"""
    tag = (await create_asset(async_client))["asset_tag"]

    resp = await async_client.post("/api/v1/accountability", json={**FORM, "asset_tag": tag})
    assert resp.status_code == 201, resp.text
    form = resp.json()["data"]
    assert form["status"] == "Pending Confirmation"

    asset = (await async_client.get(f"/api/v1/assets/{tag}")).json()["data"]
    assert asset["status"] == "Assigned"
    assert asset["assigned_to"] == "e@co.com"

    resp = await async_client.post("/api/v1/accountability", json={**FORM, "asset_tag": tag})
    assert resp.status_code == 409
    assert resp.json()["message"] == "Asset is not available for assignment"

    resp = await async_client.post(f"/api/v1/accountability/{form['form_id']}/confirm", json={})
    assert resp.status_code == 400
    assert resp.json()["message"] == "Missing required field: employee_signature"

    resp = await async_client.post(
        f"/api/v1/accountability/{form['form_id']}/confirm",
        json={"signature": "data:image/png;base64,SIGEMP"},
        headers={"X-Authenticated-User": "e@co.com"},
    )
    assert resp.status_code == 200, resp.text
    confirmed = resp.json()["data"]
    assert confirmed["status"] == "Completed"
    assert confirmed["employee_confirmed"] is True
    assert confirmed["modified_by"] == "e@co.com"

    resp = await async_client.get("/api/v1/accountability/employee/e@co.com")
    assert [f["form_id"] for f in resp.json()["data"]] == [form["form_id"]]

    resp = await async_client.get("/api/v1/employees/e@co.com/assets")
    assert [a["asset_tag"] for a in resp.json()["data"]] == [tag]

    resp = await async_client.post(
        f"/api/v1/accountability/{form['form_id']}/return",
        json={"condition": "Fair", "notes": "Scratched lid"},
    )
    assert resp.status_code == 200, resp.text
    assert resp.json()["data"]["status"] == "Returned"

    asset = (await async_client.get(f"/api/v1/assets/{tag}")).json()["data"]
    assert asset["status"] == "Available"
    assert asset["condition"] == "Fair"
    assert len(notifier.sent) == 3


@pytest.mark.anyio
async def test_unknown_form_is_404(async_client):
    resp = await async_client.post("/api/v1/accountability/ACC-missing/confirm", json={"signature": "S"})
    assert resp.status_code == 404
    assert resp.json()["message"] == "Form not found: ACC-missing"


@pytest.mark.anyio
async def test_overdue_forms_and_reminders(async_client, clock, notifier):
    tag = (await create_asset(async_client))["asset_tag"]
    await async_client.post("/api/v1/accountability", json={**FORM, "asset_tag": tag})

    resp = await async_client.get("/api/v1/accountability/overdue")
    assert resp.json()["data"] == []

    clock.advance(days=4)
    resp = await async_client.get("/api/v1/accountability/overdue")
    assert len(resp.json()["data"]) == 1

    resp = await async_client.post("/api/v1/accountability/reminders")
    assert resp.status_code == 200
    assert resp.json()["data"]["sent"] == 1
    assert len(notifier.sent) == 2


@pytest.mark.anyio
async def test_disposal_flow_over_http(async_client, renderer):
    tag = (await create_asset(async_client))["asset_tag"]

    resp = await async_client.post("/api/v1/disposals", json={**DISPOSAL, "asset_tag": tag})
    assert resp.status_code == 201, resp.text
    disposal = resp.json()["data"]
    assert disposal["status"] == "Pending Approval"

    resp = await async_client.get("/api/v1/disposals", params={"status": "Pending Approval"})
    assert [d["disposal_id"] for d in resp.json()["data"]] == [disposal["disposal_id"]]

    resp = await async_client.post(
        f"/api/v1/disposals/{disposal['disposal_id']}/decision",
        json={"approved": True, "approver_signature": "data:image/png;base64,SIGAPP"},
        headers={"X-Authenticated-User": "approver@co.com"},
    )
    assert resp.status_code == 200, resp.text
    decided = resp.json()["data"]
    assert decided["status"] == "Approved"
    assert decided["document_ref"].endswith(".pdf")

    asset = (await async_client.get(f"/api/v1/assets/{tag}")).json()["data"]
    assert asset["status"] == "Disposed"

    resp = await async_client.post(
        f"/api/v1/disposals/{disposal['disposal_id']}/cancel", json={"reason": "too late"}
    )
    assert resp.status_code == 409
    assert resp.json()["message"] == "Disposal is not pending approval"


@pytest.mark.anyio
async def test_disposal_of_assigned_asset_is_409(async_client):
    tag = (await create_asset(async_client))["asset_tag"]
    await async_client.post("/api/v1/accountability", json={**FORM, "asset_tag": tag})

    resp = await async_client.post("/api/v1/disposals", json={**DISPOSAL, "asset_tag": tag})
    assert resp.status_code == 409
    assert resp.json()["message"] == "Asset must be returned before disposal"

    resp = await async_client.get("/api/v1/disposals")
    assert resp.json()["data"] == []


@pytest.mark.anyio
async def test_audit_log_and_settings(async_client):
    tag = (await create_asset(async_client))["asset_tag"]

    resp = await async_client.get("/api/v1/audit", params={"collection": "assets", "record_key": tag})
    assert resp.status_code == 200
    entries = resp.json()["data"]
    assert [e["action"] for e in entries] == ["CREATE"]

    resp = await async_client.get("/api/v1/settings")
    assert resp.json()["data"]["next_asset_tag"] == "1001"
    assert resp.json()["data"]["enable_audit_log"] is True

    resp = await async_client.put("/api/v1/settings/enable_audit_log", json={"value": "false"})
    assert resp.status_code == 200, resp.text
    await async_client.patch(f"/api/v1/assets/{tag}", json={"notes": "quiet"})
    resp = await async_client.get("/api/v1/audit", params={"collection": "assets"})
    assert len(resp.json()["data"]) == 1

    resp = await async_client.put("/api/v1/settings/next_asset_tag", json={"value": "1"})
    assert resp.status_code == 400


@pytest.mark.anyio
async def test_settings_toggle_values_are_checked(async_client):
    resp = await async_client.put("/api/v1/settings/enable_notifications", json={"value": "maybe"})
    assert resp.status_code == 400
    assert resp.json()["message"] == "Invalid value for enable_notifications: maybe (expected true or false)"
    assert (await async_client.get("/api/v1/settings")).json()["data"]["enable_notifications"] is True

    resp = await async_client.put("/api/v1/settings/enable_notifications", json={"value": " OFF "})
    assert resp.status_code == 200, resp.text
    assert resp.json()["data"] == {"enable_notifications": "false"}
    assert (await async_client.get("/api/v1/settings")).json()["data"]["enable_notifications"] is False
