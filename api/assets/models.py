# api/assets/models.py
from datetime import date

from pydantic import BaseModel, ConfigDict, Field

from db_models import AssetCondition, AssetStatus


class AssetCreate(BaseModel):
    """Intake of a new asset; the tag is generated."""
    model_config = ConfigDict(use_enum_values=True)

    serial_number: str | None = Field(None, max_length=100)
    category: str | None = Field(None, max_length=100)
    brand: str | None = Field(None, max_length=100)
    model: str | None = Field(None, max_length=100)
    specifications: str | None = None
    condition: AssetCondition | None = None
    status: AssetStatus | None = None
    location: str | None = Field(None, max_length=255)
    date_received: date | None = None
    supplier: str | None = Field(None, max_length=255)
    purchase_price: float | None = Field(None, ge=0)
    warranty_expiry: date | None = None
    notes: str | None = None


class AssetUpdate(BaseModel):
    """Partial edit; omitted fields are left untouched."""
    model_config = ConfigDict(use_enum_values=True)

    serial_number: str | None = Field(None, min_length=1, max_length=100)
    category: str | None = Field(None, max_length=100)
    brand: str | None = Field(None, max_length=100)
    model: str | None = Field(None, max_length=100)
    specifications: str | None = None
    condition: AssetCondition | None = None
    status: AssetStatus | None = None
    location: str | None = Field(None, max_length=255)
    date_received: date | None = None
    supplier: str | None = Field(None, max_length=255)
    purchase_price: float | None = Field(None, ge=0)
    warranty_expiry: date | None = None
    notes: str | None = None
