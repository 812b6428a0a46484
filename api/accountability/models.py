# api/accountability/models.py
from pydantic import BaseModel, ConfigDict, EmailStr, Field

from db_models import AssetCondition


class AccountabilitySubmit(BaseModel):
    """Assignment of an available asset to an employee."""
    asset_tag: str | None = Field(None, max_length=50)
    employee_id: str | None = Field(None, max_length=255)
    employee_name: str | None = Field(None, max_length=255)
    employee_email: EmailStr | None = None
    department: str | None = Field(None, max_length=255)
    position: str | None = Field(None, max_length=255)
    it_personnel: str | None = Field(None, max_length=255)
    it_signature: str | None = None
    notes: str | None = None


class AccountabilityConfirm(BaseModel):
    signature: str = ""
    notes: str | None = None


class AccountabilityReturn(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    condition: AssetCondition | None = None
    received_by: str | None = Field(None, max_length=255)
    notes: str | None = None
