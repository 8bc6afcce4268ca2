"""
Conversion between client-facing entities and persisted records.

Persisted records are plain dicts keyed by column name (expiry_date,
shelf_number, ...). Client entities are the pydantic schemas, whose
camelCase client names come from field aliases. Apart from
to_client_bill, which needs the bill's line items, nothing here does I/O.
"""
from datetime import datetime, timezone
from typing import Awaitable, Callable, List, Optional, Union

from pharmacy_pos.schemas import Bill, BillItem, Medicine, MedicineCreate, MedicineUpdate
from pharmacy_pos.store.base import Record

# Client attributes written to the medicines collection
MEDICINE_WRITABLE_FIELDS = {
    "name",
    "manufacturer",
    "price",
    "stock",
    "expiry_date",
    "category",
    "description",
    "shelf_number",
}

LineItemsFetcher = Callable[[str], Awaitable[List[Record]]]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_client_medicine(row: Record) -> Medicine:
    return Medicine(
        id=row["id"],
        name=row["name"],
        manufacturer=row.get("manufacturer"),
        price=row["price"],
        stock=row["stock"],
        expiry_date=row["expiry_date"],
        category=row.get("category"),
        description=row.get("description"),
        shelf_number=row.get("shelf_number"),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


def to_persisted_medicine(
    medicine: Union[Medicine, MedicineCreate, MedicineUpdate],
    now: Optional[datetime] = None,
) -> Record:
    """
    Partial persisted shape of a medicine.

    Fields never set on the input are omitted (patch semantics, nothing
    is nulled out). updated_at is always stamped with the current time.
    """
    row = medicine.model_dump(include=MEDICINE_WRITABLE_FIELDS, exclude_unset=True)
    row["updated_at"] = now or _utcnow()
    return row


def to_client_bill_item(row: Record) -> BillItem:
    return BillItem(
        id=row.get("id"),
        bill_id=row.get("bill_id"),
        medicine_id=row["medicine_id"],
        medicine_name=row["medicine_name"],
        quantity=row["quantity"],
        price_per_unit=row["price_per_unit"],
        total_price=row["total_price"],
    )


def to_persisted_bill_item(item: BillItem, bill_id: str) -> Record:
    return {
        "bill_id": bill_id,
        "medicine_id": item.medicine_id,
        "medicine_name": item.medicine_name,
        "quantity": item.quantity,
        "price_per_unit": item.price_per_unit,
        "total_price": item.total_price,
    }


async def to_client_bill(row: Record, fetch_line_items: LineItemsFetcher) -> Bill:
    """
    Materialize a bill with its line items.

    Line items are not embedded in the bill record, so they are fetched
    through fetch_line_items(bill_id). Errors from the fetch propagate.
    """
    item_rows = await fetch_line_items(row["id"])
    return Bill(
        id=row["id"],
        items=[to_client_bill_item(item) for item in item_rows],
        total_amount=row["total_amount"],
        discount=row.get("discount") or 0,
        final_amount=row["final_amount"],
        customer_name=row.get("customer_name"),
        customer_phone=row.get("customer_phone"),
        date=row.get("date"),
    )
