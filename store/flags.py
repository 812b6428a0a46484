# store/flags.py
"""Parsing of the boolean toggles kept as text in the settings collection."""
from core.errors import ValidationError

TRUE_VALUES = ("true", "1", "yes", "on")
FALSE_VALUES = ("false", "0", "no", "off")

AUDIT_TOGGLE_KEY = "enable_audit_log"


def parse_flag(value: str | None, default: bool) -> bool:
    """Read a stored toggle; an absent or blank value means `default`."""
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in TRUE_VALUES


def normalize_flag(key: str, value: str) -> str:
    """Canonical "true"/"false" for an incoming toggle value."""
    cleaned = (value or "").strip().lower()
    if cleaned in TRUE_VALUES:
        return "true"
    if cleaned in FALSE_VALUES:
        return "false"
    raise ValidationError(
        f"Invalid value for {key}: {value} (expected true or false)", field=key
    )
