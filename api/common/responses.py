# api/common/responses.py
"""
Translation of domain errors and request validation failures into the
uniform result envelope.
"""
from typing import Any

from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from core.errors import AssetTrackerError
from core.logging import get_logger
from .models import ResultEnvelope

logger = get_logger("api")

STATUS_BY_KIND = {
    "validation": status.HTTP_400_BAD_REQUEST,
    "duplicate": status.HTTP_409_CONFLICT,
    "not_found": status.HTTP_404_NOT_FOUND,
    "conflict": status.HTTP_409_CONFLICT,
    "dependency": status.HTTP_502_BAD_GATEWAY,
}


def ok(message: str, data: Any = None) -> ResultEnvelope:
    return ResultEnvelope(success=True, message=message, data=jsonable_encoder(data))


def failure(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ResultEnvelope(success=False, message=message).model_dump(),
    )


async def asset_tracker_error_handler(request: Request, exc: AssetTrackerError) -> JSONResponse:
    status_code = STATUS_BY_KIND.get(exc.kind, status.HTTP_400_BAD_REQUEST)
    logger.info(
        "request_failed",
        extra={"path": request.url.path, "kind": exc.kind, "error": exc.message},
    )
    return failure(status_code, exc.message)


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    if not errors:
        return failure(status.HTTP_400_BAD_REQUEST, "Invalid request")
    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    return failure(status.HTTP_400_BAD_REQUEST, f"Invalid field: {field} ({first.get('msg', '')})")
