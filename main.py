import json
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from api.accountability.views import router as accountability_router
from api.admin.views import router as admin_router
from api.assets.views import router as assets_router
from api.common.responses import asset_tracker_error_handler, request_validation_error_handler
from api.disposal.views import router as disposal_router
from api.employees.views import router as employees_router
from config import settings
from core.errors import AssetTrackerError
from core.logging import configure_logging, get_logger
from db import init_db

logger = get_logger("app")


def get_cors_origins() -> list[str]:
    """Get CORS origins from settings or use defaults."""
    cors_env = settings.CORS_ORIGINS

    # Try to parse as JSON array
    if cors_env:
        try:
            origins = json.loads(cors_env)
            if isinstance(origins, list):
                return origins
        except json.JSONDecodeError:
            # If not valid JSON, treat as comma-separated
            return [o.strip() for o in cors_env.split(",") if o.strip()]

    # Default origins for development
    return [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:3000",
    ]


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(level=settings.LOG_LEVEL, json_output=settings.LOG_JSON)
    await init_db()
    logger.info("startup", extra={"app_env": settings.APP_ENV})
    yield


app = FastAPI(
    title="IT Asset Accountability API",
    description="Asset intake, accountable assignment to employees, returns and approved disposal",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Every failure is returned as {success: false, message, data: null}
app.add_exception_handler(AssetTrackerError, asset_tracker_error_handler)
app.add_exception_handler(RequestValidationError, request_validation_error_handler)

app.include_router(assets_router, prefix="/api/v1")
app.include_router(employees_router, prefix="/api/v1")
app.include_router(accountability_router, prefix="/api/v1")
app.include_router(disposal_router, prefix="/api/v1")
app.include_router(admin_router, prefix="/api/v1")


# Health check endpoint
@app.get("/health", tags=["system"])
async def health_check():
    """Health check endpoint for monitoring."""
    return {"status": "healthy"}
