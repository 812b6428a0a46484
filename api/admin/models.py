# api/admin/models.py
from pydantic import BaseModel, Field


class SettingUpdate(BaseModel):
    value: str = Field(..., max_length=500)
