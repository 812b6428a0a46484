# api/assets/views.py
"""
Asset administration endpoints.
"""
from fastapi import APIRouter, Query, status

from api.common.models import ResultEnvelope
from api.common.responses import ok
from core.deps import Actor, ServicesDep
from db_models import AssetStatus
from .models import AssetCreate, AssetUpdate

router = APIRouter(prefix="/assets", tags=["assets"])


@router.post(
    "",
    response_model=ResultEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new asset",
)
async def add_asset_endpoint(
    payload: AssetCreate,
    actor: Actor,
    services: ServicesDep,
) -> ResultEnvelope:
    """
    Register an asset under the next generated tag, with status Available
    unless another non-workflow status is given.
    """
    asset = await services.assets.add_asset(payload.model_dump(exclude_none=True), actor)
    return ok(f"Asset {asset['asset_tag']} added", asset)


@router.get(
    "",
    response_model=ResultEnvelope,
    summary="List or search assets",
)
async def list_assets_endpoint(
    services: ServicesDep,
    status_filter: AssetStatus | None = Query(None, alias="status"),
    category: str | None = Query(None),
    assigned_to: str | None = Query(None),
    location: str | None = Query(None),
    q: str | None = Query(None, description="Free text matched against every field"),
) -> ResultEnvelope:
    filters = {
        "status": status_filter.value if status_filter else None,
        "category": category,
        "assigned_to": assigned_to,
        "location": location,
    }
    assets = await services.assets.list_assets(filters, q)
    return ok(f"{len(assets)} asset(s) found", assets)


@router.get(
    "/{asset_tag}",
    response_model=ResultEnvelope,
    summary="Get asset by tag",
)
async def get_asset_endpoint(asset_tag: str, services: ServicesDep) -> ResultEnvelope:
    asset = await services.assets.get_asset(asset_tag)
    return ok("Asset found", asset)


@router.patch(
    "/{asset_tag}",
    response_model=ResultEnvelope,
    summary="Edit asset details",
)
async def update_asset_endpoint(
    asset_tag: str,
    payload: AssetUpdate,
    actor: Actor,
    services: ServicesDep,
) -> ResultEnvelope:
    data = payload.model_dump(exclude_none=True)
    data["asset_tag"] = asset_tag
    asset = await services.assets.update_asset(data, actor)
    return ok(f"Asset {asset_tag} updated", asset)


@router.delete(
    "/{asset_tag}",
    response_model=ResultEnvelope,
    summary="Delete an asset",
)
async def delete_asset_endpoint(
    asset_tag: str,
    actor: Actor,
    services: ServicesDep,
) -> ResultEnvelope:
    """Hard delete; refused while the asset is assigned."""
    removed = await services.assets.delete_asset(asset_tag, actor)
    return ok(f"Asset {asset_tag} deleted", removed)
