# store/app_settings.py
"""
Persisted application settings: the asset tag counter and the toggles for
notifications, document generation and audit logging.

Rows live in the `settings` collection; a missing row falls back to the
configured default.
"""
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from config import settings as app_config
from core.errors import ValidationError
from core.logging import get_logger
from db_models import SETTINGS, Setting
from store.flags import AUDIT_TOGGLE_KEY, parse_flag
from store.record_store import RecordStore

logger = get_logger("store.settings")


class AppSettingsStore:
    NEXT_ASSET_TAG = "next_asset_tag"
    ENABLE_NOTIFICATIONS = "enable_notifications"
    ENABLE_DOCUMENT_GENERATION = "enable_document_generation"
    ENABLE_AUDIT_LOG = AUDIT_TOGGLE_KEY

    def __init__(self, store: RecordStore, config=app_config):
        self.store = store
        self.config = config

    async def get(self, key: str, default: str | None = None) -> str | None:
        row = await self.store.get_one(SETTINGS.name, "key", key)
        if row is None or row["value"] == "":
            return default
        return row["value"]

    async def set(self, key: str, value, actor: str = "system") -> None:
        patch = {"value": str(value), "modified_at": self.store.clock.now(), "modified_by": actor}
        if await self.store.get_one(SETTINGS.name, "key", key) is None:
            await self.store.insert(SETTINGS.name, {"key": key, **patch}, actor)
        else:
            await self.store.update(SETTINGS.name, "key", key, patch, actor)

    async def get_flag(self, key: str, default: bool) -> bool:
        return parse_flag(await self.get(key), default)

    async def notifications_enabled(self) -> bool:
        return await self.get_flag(self.ENABLE_NOTIFICATIONS, self.config.ENABLE_NOTIFICATIONS)

    async def documents_enabled(self) -> bool:
        return await self.get_flag(
            self.ENABLE_DOCUMENT_GENERATION, self.config.ENABLE_DOCUMENT_GENERATION
        )

    async def audit_enabled(self) -> bool:
        return await self.get_flag(self.ENABLE_AUDIT_LOG, self.config.ENABLE_AUDIT_LOG)

    # ---------- Asset tag counter ----------

    async def allocate_asset_tag(self) -> str:
        """Reserve the next asset tag, e.g. IT-1000."""
        number = await self._next_counter_value(self.NEXT_ASSET_TAG, self.config.ASSET_TAG_START)
        return f"{self.config.ASSET_TAG_PREFIX}{number:0{self.config.ASSET_TAG_DIGITS}d}"

    async def _next_counter_value(self, key: str, start: int) -> int:
        try:
            return await self._increment(key, start)
        except IntegrityError:
            # Another caller created the counter row first
            logger.debug("counter_create_race_retry", extra={"key": key})
            return await self._increment(key, start)

    async def _increment(self, key: str, start: int) -> int:
        """
        Return the counter's current value and store value + 1.

        The row is read with FOR UPDATE inside one transaction, so concurrent
        callers on a locking backend serialize instead of sharing a number.
        """
        async with self.store.session_factory() as session:
            async with session.begin():
                counter = (
                    await session.execute(
                        select(Setting).where(Setting.key == key).with_for_update()
                    )
                ).scalar_one_or_none()
                if counter is None:
                    current = start
                    session.add(
                        Setting(
                            key=key,
                            value=str(current + 1),
                            description="Next asset tag number",
                            modified_at=self.store.clock.now(),
                            modified_by="system",
                        )
                    )
                else:
                    try:
                        current = int(counter.value) if counter.value else start
                    except ValueError:
                        raise ValidationError(
                            f"Setting {key} is not a number: {counter.value!r}"
                        ) from None
                    counter.value = str(current + 1)
                    counter.modified_at = self.store.clock.now()
        logger.debug("counter_allocated", extra={"key": key, "value": current})
        return current
