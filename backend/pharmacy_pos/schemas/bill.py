from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class BillItem(BaseModel):
    """
    One line of a bill.

    medicine_name and price_per_unit are snapshots taken at sale time.
    total_price is supplied by the caller and is never recomputed.
    """
    id: Optional[str] = None
    bill_id: Optional[str] = None
    medicine_id: str
    medicine_name: str
    quantity: int = Field(gt=0)
    price_per_unit: Decimal
    total_price: Decimal

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class Bill(BaseModel):
    id: str
    items: List[BillItem] = Field(default_factory=list)
    total_amount: Decimal
    discount: Decimal = Decimal("0")
    final_amount: Decimal
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    date: Optional[datetime] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True
