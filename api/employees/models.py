# api/employees/models.py
from pydantic import BaseModel, ConfigDict, EmailStr, Field

from db_models import EmployeeStatus


class EmployeeCreate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    employee_id: str | None = Field(None, max_length=255)
    name: str | None = Field(None, max_length=255)
    email: EmailStr | None = None
    department: str | None = Field(None, max_length=255)
    position: str | None = Field(None, max_length=255)
    phone: str | None = Field(None, max_length=50)
    status: EmployeeStatus | None = None


class EmployeeUpdate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    name: str | None = Field(None, min_length=1, max_length=255)
    email: EmailStr | None = None
    department: str | None = Field(None, max_length=255)
    position: str | None = Field(None, max_length=255)
    phone: str | None = Field(None, max_length=50)
    status: EmployeeStatus | None = None
