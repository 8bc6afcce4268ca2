"""Client-facing medicine shapes.

Attributes are snake_case; the camelCase client shape (expiryDate,
shelfNumber, ...) is available through aliases, both when parsing and
with model_dump(by_alias=True).
"""
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class MedicineCreate(BaseModel):
    """A new medicine. id and timestamps are assigned by the store."""
    name: str = Field(min_length=1)
    manufacturer: Optional[str] = None
    price: Decimal = Field(ge=0)
    stock: int = Field(ge=0)
    expiry_date: date
    category: Optional[str] = None
    description: Optional[str] = None
    shelf_number: Optional[str] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class MedicineUpdate(BaseModel):
    """Partial patch. Only fields that were explicitly set are written."""
    name: Optional[str] = None
    manufacturer: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0)
    stock: Optional[int] = None
    expiry_date: Optional[date] = None
    category: Optional[str] = None
    description: Optional[str] = None
    shelf_number: Optional[str] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class Medicine(BaseModel):
    id: str
    name: str
    manufacturer: Optional[str] = None
    price: Decimal
    stock: int
    expiry_date: date
    category: Optional[str] = None
    description: Optional[str] = None
    shelf_number: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True
