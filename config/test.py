from __future__ import annotations

from pydantic_settings import SettingsConfigDict

from config.base import AppSettings


class TestSettings(AppSettings):
    # Tests build their own engine per test; this is only the import-time default
    DATABASE_URL: str = "sqlite+aiosqlite:///:memory:"
    APP_ENV: str = "test"
    DEBUG: bool = False
    LOG_LEVEL: str = "DEBUG"
    LOG_JSON: bool = False

    model_config = SettingsConfigDict(env_prefix="TEST_")
