# db_models/__init__.py
"""Record collections and their column schemas."""
from db_models.collection import Collection
from db_models.asset import Asset, AssetCondition, AssetStatus
from db_models.employee import Employee, EmployeeStatus
from db_models.accountability import (
    ACTIVE_ACCOUNTABILITY_STATUSES,
    AccountabilityRecord,
    AccountabilityStatus,
)
from db_models.disposal import DisposalMethod, DisposalRecord, DisposalStatus
from db_models.audit_log import AuditAction, AuditLogEntry
from db_models.setting import Setting


ASSETS = Collection("assets", Asset, "asset_tag")
EMPLOYEES = Collection("employees", Employee, "employee_id")
ACCOUNTABILITY = Collection("accountability_forms", AccountabilityRecord, "form_id")
DISPOSALS = Collection("disposals", DisposalRecord, "disposal_id")
AUDIT_LOG = Collection("audit_log", AuditLogEntry, "entry_id", stamped=False, audited=False)
SETTINGS = Collection("settings", Setting, "key", stamped=False, audited=False)

COLLECTIONS: dict[str, Collection] = {
    c.name: c for c in (ASSETS, EMPLOYEES, ACCOUNTABILITY, DISPOSALS, AUDIT_LOG, SETTINGS)
}

__all__ = [
    "ACCOUNTABILITY",
    "ACTIVE_ACCOUNTABILITY_STATUSES",
    "ASSETS",
    "AUDIT_LOG",
    "AccountabilityRecord",
    "AccountabilityStatus",
    "Asset",
    "AssetCondition",
    "AssetStatus",
    "AuditAction",
    "AuditLogEntry",
    "COLLECTIONS",
    "Collection",
    "DISPOSALS",
    "DisposalMethod",
    "DisposalRecord",
    "DisposalStatus",
    "EMPLOYEES",
    "Employee",
    "EmployeeStatus",
    "SETTINGS",
    "Setting",
]
