from store.record_store import RecordStore
from store.app_settings import AppSettingsStore

__all__ = ["RecordStore", "AppSettingsStore"]
