import json
from datetime import date

import pytest

from core.errors import ConflictError, DuplicateError, NotFoundError, ValidationError
from db_models import ASSETS, EMPLOYEES


def asset_row(tag, serial, **fields):
    row = {
        "asset_tag": tag,
        "serial_number": serial,
        "category": "Laptop",
        "brand": "Dell",
        "model": "X1",
        "condition": "Good",
        "status": "Available",
        "date_received": date(2024, 1, 10),
    }
    row.update(fields)
    return row


@pytest.fixture
async def seeded(store):
    await store.insert("assets", asset_row("IT-0001", "SN-A", purchase_price=1200.0), "seed")
    await store.insert(
        "assets",
        asset_row("IT-0002", "SN-B", category="Monitor", brand="LG", status="Assigned",
                  assigned_to="e@co.com", purchase_price=300.0),
        "seed",
    )
    await store.insert(
        "assets",
        asset_row("IT-0003", "SN-C", category="Laptop Dock", brand="Lenovo",
                  status="Under Maintenance", purchase_price=1200.5),
        "seed",
    )
    return store


@pytest.mark.anyio
async def test_get_all_on_empty_collection_returns_empty_list(store):
    assert await store.get_all("assets") == []
    assert await store.get_all("disposals") == []


@pytest.mark.anyio
async def test_unknown_collection_and_column_are_not_found(store):
    with pytest.raises(NotFoundError, match="Collection not found: printers"):
        await store.get_all("printers")
    with pytest.raises(NotFoundError, match="Column not found"):
        await store.get_one("assets", "colour", "red")
    with pytest.raises(NotFoundError, match="Column not found"):
        await store.insert("assets", asset_row("IT-0009", "SN-Z", colour="red"))


@pytest.mark.anyio
async def test_insert_stamps_and_fills_declared_columns(store, clock):
    stored = await store.insert("assets", asset_row("IT-0001", "SN-A"), "it.admin@co.com")

    assert list(stored.keys()) == ASSETS.columns
    assert stored["created_by"] == "it.admin@co.com"
    assert stored["created_at"] is not None
    # Missing text fields come back empty, missing non-text fields as None
    assert stored["location"] == ""
    assert stored["assigned_to"] == ""
    assert stored["purchase_price"] is None
    assert stored["modified_by"] == ""


@pytest.mark.anyio
async def test_insert_requires_key_and_rejects_duplicate_key(store):
    await store.insert("assets", asset_row("IT-0001", "SN-A"))

    with pytest.raises(DuplicateError):
        await store.insert("assets", asset_row("IT-0001", "SN-OTHER"))
    with pytest.raises(ValidationError, match="asset_tag"):
        await store.insert("assets", asset_row("", "SN-X"))

    assert len(await store.get_all("assets")) == 1


@pytest.mark.anyio
async def test_update_writes_only_patched_fields(seeded, clock):
    clock.advance(hours=2)
    before = await seeded.get_one("assets", "asset_tag", "IT-0001")

    after = await seeded.update("assets", "asset_tag", "IT-0001", {"location": "Floor 3"}, "ops")

    assert after["location"] == "Floor 3"
    assert after["modified_by"] == "ops"
    assert after["modified_at"] is not None
    unchanged = {k for k in ASSETS.columns if k not in ("location", "modified_at", "modified_by")}
    assert {k: after[k] for k in unchanged} == {k: before[k] for k in unchanged}


@pytest.mark.anyio
async def test_update_missing_row_is_not_found(seeded):
    with pytest.raises(NotFoundError, match="IT-9999"):
        await seeded.update("assets", "asset_tag", "IT-9999", {"location": "x"})


@pytest.mark.anyio
async def test_update_cannot_change_key(seeded):
    with pytest.raises(ConflictError):
        await seeded.update("assets", "asset_tag", "IT-0001", {"asset_tag": "IT-7777"})


@pytest.mark.anyio
async def test_update_by_non_key_column_hits_first_match(store):
    await store.insert("employees", {"employee_id": "b@co.com", "name": "B", "email": "b@co.com", "department": "Ops"})
    await store.insert("employees", {"employee_id": "a@co.com", "name": "A", "email": "a@co.com", "department": "Ops"})

    updated = await store.update("employees", "department", "Ops", {"position": "Lead"})

    assert updated["employee_id"] == "a@co.com"
    rows = {r["employee_id"]: r for r in await store.get_all("employees")}
    assert rows["a@co.com"]["position"] == "Lead"
    assert rows["b@co.com"]["position"] == ""


@pytest.mark.anyio
async def test_delete_returns_snapshot(seeded):
    removed = await seeded.delete("assets", "asset_tag", "IT-0003", "admin")

    assert removed["serial_number"] == "SN-C"
    assert await seeded.get_one("assets", "asset_tag", "IT-0003") is None
    with pytest.raises(NotFoundError):
        await seeded.delete("assets", "asset_tag", "IT-0003", "admin")


@pytest.mark.anyio
async def test_audit_trail_records_each_write(store):
    await store.insert("assets", asset_row("IT-0001", "SN-A"), "creator")
    await store.update("assets", "asset_tag", "IT-0001", {"location": "Lab"}, "editor")
    await store.delete("assets", "asset_tag", "IT-0001", "remover")

    entries = await store.audit_entries("assets", "IT-0001")

    assert [e["action"] for e in entries] == ["CREATE", "UPDATE", "DELETE"]
    assert [e["actor"] for e in entries] == ["creator", "editor", "remover"]
    create, update, delete = entries
    assert create["before_snapshot"] == ""
    assert json.loads(create["after_snapshot"])["serial_number"] == "SN-A"
    assert json.loads(update["before_snapshot"])["location"] == ""
    assert json.loads(update["after_snapshot"])["location"] == "Lab"
    assert json.loads(delete["before_snapshot"])["location"] == "Lab"
    assert delete["after_snapshot"] == ""


@pytest.mark.anyio
async def test_audit_can_be_switched_off(store, services):
    await services.app_settings.set("enable_audit_log", "false")

    await store.insert("assets", asset_row("IT-0001", "SN-A"))

    assert await store.audit_entries("assets") == []


@pytest.mark.anyio
@pytest.mark.parametrize("value, expected", [("Off", False), ("no", False), (" YES ", True), ("", True)])
async def test_store_and_settings_read_the_audit_toggle_alike(store, services, value, expected):
    await services.app_settings.set("enable_audit_log", value)

    await store.insert("assets", asset_row("IT-0001", "SN-A"))

    assert await services.app_settings.audit_enabled() is expected
    assert bool(await store.audit_entries("assets")) is expected


@pytest.mark.anyio
async def test_audit_failure_never_fails_the_write(store, monkeypatch):
    async def broken(session):
        raise RuntimeError("audit sheet unavailable")

    monkeypatch.setattr(store, "_audit_enabled", broken)

    stored = await store.insert("assets", asset_row("IT-0001", "SN-A"))

    assert stored["asset_tag"] == "IT-0001"
    assert await store.get_one("assets", "asset_tag", "IT-0001") is not None


@pytest.mark.anyio
async def test_settings_and_audit_collections_are_not_audited(store, services):
    await services.app_settings.set("enable_notifications", "true")

    assert await store.audit_entries() == []


@pytest.mark.anyio
async def test_search_status_filter_is_subset_of_get_all(seeded):
    everything = await seeded.get_all("assets")

    found = await seeded.search("assets", {"status": "Available"})

    assert found == [r for r in everything if r["status"] == "Available"]


@pytest.mark.anyio
async def test_search_text_filters_are_case_insensitive_substrings(seeded):
    found = await seeded.search("assets", {"category": "LAPTOP"})

    assert {r["asset_tag"] for r in found} == {"IT-0001", "IT-0003"}


@pytest.mark.anyio
async def test_search_non_text_filters_match_exactly(seeded):
    found = await seeded.search("assets", {"purchase_price": 1200.0})

    assert [r["asset_tag"] for r in found] == ["IT-0001"]


@pytest.mark.anyio
async def test_search_filters_combine_with_and(seeded):
    found = await seeded.search("assets", {"category": "laptop", "brand": "lenovo"})

    assert [r["asset_tag"] for r in found] == ["IT-0003"]


@pytest.mark.anyio
async def test_search_free_text_matches_any_field(seeded):
    found = await seeded.search("assets", text="e@CO.com")

    assert [r["asset_tag"] for r in found] == ["IT-0002"]
    assert await seeded.search("assets", text="no such thing") == []


@pytest.mark.anyio
async def test_search_without_criteria_returns_everything(seeded):
    assert len(await seeded.search("assets")) == 3
    assert await seeded.search(EMPLOYEES.name, {"department": "Ops"}) == []
