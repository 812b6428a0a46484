from __future__ import annotations

from pydantic_settings import BaseSettings


class AppSettings(BaseSettings):
    """Settings shared by every environment."""

    APP_ENV: str = "local"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True
    CORS_ORIGINS: str = ""

    # Asset tag generation: IT-1000, IT-1001, ...
    ASSET_TAG_PREFIX: str = "IT-"
    ASSET_TAG_START: int = 1000
    ASSET_TAG_DIGITS: int = 4

    ACCOUNTABILITY_OVERDUE_DAYS: int = 3
    DISPOSAL_OVERDUE_DAYS: int = 5

    # Defaults for the toggles kept in the settings collection
    ENABLE_NOTIFICATIONS: bool = True
    ENABLE_DOCUMENT_GENERATION: bool = True
    ENABLE_AUDIT_LOG: bool = True

    IT_NOTIFICATION_EMAIL: str | None = None
