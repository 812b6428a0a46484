# api/disposal/models.py
from datetime import date

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from db_models import DisposalMethod


class DisposalSubmit(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    asset_tag: str | None = Field(None, max_length=50)
    method: DisposalMethod | None = None
    disposal_date: date | None = None
    reason: str | None = None
    it_personnel: str | None = Field(None, max_length=255)
    it_signature: str | None = None
    requester_email: EmailStr | None = None
    approver_name: str | None = Field(None, max_length=255)
    approver_email: EmailStr | None = None
    estimated_value: float | None = Field(None, ge=0)
    notes: str | None = None


class DisposalDecision(BaseModel):
    approved: bool
    approver_signature: str = ""
    notes: str | None = None


class DisposalCancel(BaseModel):
    reason: str | None = None
