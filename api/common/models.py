# api/common/models.py
from typing import Any

from pydantic import BaseModel


class ResultEnvelope(BaseModel):
    """Uniform response shape for every entry point."""
    success: bool
    message: str
    data: Any = None


class ReminderResult(BaseModel):
    sent: int
    ids: list[str]
