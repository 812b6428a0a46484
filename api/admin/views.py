# api/admin/views.py
"""
Audit trail inspection and persisted settings toggles.
"""
from fastapi import APIRouter, Query

from api.common.models import ResultEnvelope
from api.common.responses import ok
from core.deps import Actor, ServicesDep
from core.errors import ValidationError
from store import AppSettingsStore
from store.flags import normalize_flag
from .models import SettingUpdate

router = APIRouter(tags=["admin"])

# The tag counter is only advanced by asset intake
EDITABLE_SETTINGS = (
    AppSettingsStore.ENABLE_NOTIFICATIONS,
    AppSettingsStore.ENABLE_DOCUMENT_GENERATION,
    AppSettingsStore.ENABLE_AUDIT_LOG,
)


@router.get("/audit", response_model=ResultEnvelope, summary="Audit log entries")
async def audit_log_endpoint(
    services: ServicesDep,
    collection: str | None = Query(None),
    record_key: str | None = Query(None),
) -> ResultEnvelope:
    entries = await services.store.audit_entries(collection, record_key)
    return ok(f"{len(entries)} audit entr{'y' if len(entries) == 1 else 'ies'}", entries)


@router.get("/settings", response_model=ResultEnvelope, summary="Effective settings")
async def get_settings_endpoint(services: ServicesDep) -> ResultEnvelope:
    app_settings = services.app_settings
    return ok(
        "Settings",
        {
            AppSettingsStore.NEXT_ASSET_TAG: await app_settings.get(AppSettingsStore.NEXT_ASSET_TAG),
            AppSettingsStore.ENABLE_NOTIFICATIONS: await app_settings.notifications_enabled(),
            AppSettingsStore.ENABLE_DOCUMENT_GENERATION: await app_settings.documents_enabled(),
            AppSettingsStore.ENABLE_AUDIT_LOG: await app_settings.audit_enabled(),
        },
    )


@router.put("/settings/{key}", response_model=ResultEnvelope, summary="Change a settings toggle")
async def put_setting_endpoint(
    key: str,
    payload: SettingUpdate,
    actor: Actor,
    services: ServicesDep,
) -> ResultEnvelope:
    if key not in EDITABLE_SETTINGS:
        raise ValidationError(f"Setting cannot be changed: {key}", field=key)
    value = normalize_flag(key, payload.value)
    await services.app_settings.set(key, value, actor)
    return ok(f"Setting {key} updated", {key: value})
