# core/records.py
"""Helpers shared by the workflow record types."""
import secrets
from collections.abc import Awaitable, Callable
from datetime import datetime

from core.errors import DependencyError

ID_ATTEMPTS = 5


def generate_record_id(prefix: str, now: datetime) -> str:
    """Time + random id, e.g. ACC-20240501093000-7F3A9C."""
    return f"{prefix}-{now:%Y%m%d%H%M%S}-{secrets.token_hex(3).upper()}"


async def unique_record_id(
    prefix: str,
    now: datetime,
    exists: Callable[[str], Awaitable[bool]],
) -> str:
    """Draw ids until one is unused; collisions are only checked, not prevented."""
    for _ in range(ID_ATTEMPTS):
        candidate = generate_record_id(prefix, now)
        if not await exists(candidate):
            return candidate
    raise DependencyError(f"Could not allocate a unique {prefix} id")


def append_note(existing: str | None, note: str | None, label: str | None = None) -> str:
    """Append a line to a free-text notes field."""
    existing = existing or ""
    if not note:
        return existing
    line = f"{label}: {note}" if label else note
    return f"{existing}\n{line}" if existing else line
