# core/services.py
"""
Wiring of the record store, registry and workflows.
"""
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from api.accountability.db_manager import AccountabilityWorkflow
from api.assets.db_manager import AssetRegistry
from api.disposal.db_manager import DisposalWorkflow
from api.employees.db_manager import EmployeeDirectory
from config import settings as app_config
from core.clock import Clock
from core.collaborators import (
    DocumentRenderer,
    LoggingDocumentRenderer,
    LoggingNotificationSender,
    NotificationSender,
)
from core.side_effects import SideEffects
from store import AppSettingsStore, RecordStore


@dataclass
class Services:
    store: RecordStore
    app_settings: AppSettingsStore
    employees: EmployeeDirectory
    assets: AssetRegistry
    accountability: AccountabilityWorkflow
    disposal: DisposalWorkflow


def build_services(
    session_factory: async_sessionmaker[AsyncSession],
    *,
    notifier: NotificationSender | None = None,
    renderer: DocumentRenderer | None = None,
    clock: Clock | None = None,
    config=app_config,
) -> Services:
    clock = clock or Clock()
    store = RecordStore(session_factory, clock=clock, audit_default=config.ENABLE_AUDIT_LOG)
    app_settings = AppSettingsStore(store, config)
    effects = SideEffects(
        notifier or LoggingNotificationSender(),
        renderer or LoggingDocumentRenderer(),
        app_settings,
    )
    employees = EmployeeDirectory(store)
    assets = AssetRegistry(store, app_settings, employees, clock)
    return Services(
        store=store,
        app_settings=app_settings,
        employees=employees,
        assets=assets,
        accountability=AccountabilityWorkflow(store, assets, employees, effects, clock, config),
        disposal=DisposalWorkflow(store, assets, effects, clock, config),
    )
