"""
Injectable time source.

Workflow code asks a Clock for the current time so tests can pin it and
overdue detection stays deterministic.
"""

from datetime import date, datetime, timedelta, timezone


class Clock:
    """Production clock returning timezone-aware UTC times."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def today(self) -> date:
        return self.now().date()


class FixedClock(Clock):
    """Clock that returns a set instant until moved."""

    def __init__(self, at: datetime):
        self._at = as_utc(at)

    def now(self) -> datetime:
        return self._at

    def advance(self, **delta) -> None:
        self._at = self._at + timedelta(**delta)


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes (e.g. read back from SQLite) as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
