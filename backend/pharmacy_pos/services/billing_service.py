"""
Billing engine: the in-memory bill collection and bill creation.

create_bill is a sequence of independent store writes with no shared
transaction:

    1. insert the bill record
    2. batch insert its line items
    3. decrement stock, one medicine at a time, through the inventory ledger

A failure in step 1 leaves nothing behind. A failure in step 2 or 3 is
reported and raised, but what was already written stays written; there
is no rollback.
"""
import asyncio
import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence, Union

from pydantic import ValidationError

from pharmacy_pos.core.audit import AuditLog
from pharmacy_pos.core.exceptions import StoreError
from pharmacy_pos.core.notifications import Notifier, report_failure
from pharmacy_pos.schemas import Bill, BillItem, MedicineUpdate
from pharmacy_pos.services.inventory_service import InventoryLedger
from pharmacy_pos.services.load_state import LoadState
from pharmacy_pos.services.record_mapper import to_client_bill, to_persisted_bill_item
from pharmacy_pos.store.base import BILL_ITEMS, BILLS, Record, RecordStore

logger = logging.getLogger(__name__)

LineItem = Union[BillItem, Dict[str, Any]]


def _to_decimal(value) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


class BillingEngine:
    def __init__(
        self,
        store: RecordStore,
        inventory: InventoryLedger,
        notifier: Notifier,
        load_state: LoadState | None = None,
    ):
        self._store = store
        self._inventory = inventory
        self._notifier = notifier
        self._load_state = load_state or inventory.load_state
        self._bills: List[Bill] = []

    @property
    def bills(self) -> List[Bill]:
        """Snapshot of the collection, most recent first."""
        return list(self._bills)

    @property
    def load_state(self) -> LoadState:
        return self._load_state

    def get_bill(self, bill_id: str) -> Optional[Bill]:
        for bill in self._bills:
            if bill.id == bill_id:
                return bill
        return None

    def _fail(self, title: str, error: Exception) -> None:
        report_failure(self._notifier, title, error)

    async def _fetch_line_items(self, bill_id: str) -> List[Record]:
        result = await self._store.select_where(BILL_ITEMS, "bill_id", bill_id)
        return result.unwrap() or []

    async def fetch_bills(self) -> List[Bill]:
        """
        Replace the collection with all bills, newest first.

        Each bill's line items are fetched concurrently. If any of those
        fetches fails the whole refresh is abandoned: the failure is
        reported and the previous collection is returned unchanged.
        """
        with self._load_state.tracking(LoadState.BILLS):
            result = await self._store.select_all(BILLS, order_by="date", ascending=False)
            if not result.ok:
                self._fail("Error fetching bills", result.error)
                return self.bills

            try:
                bills = await asyncio.gather(
                    *(to_client_bill(row, self._fetch_line_items) for row in result.data or [])
                )
            except StoreError as e:
                self._fail("Error fetching bill items", e)
                return self.bills
            except (ValidationError, KeyError) as e:
                self._fail("Error fetching bills", e)
                return self.bills

            self._bills = list(bills)
            logger.info(f"Fetched {len(self._bills)} bills")
            return self.bills

    async def create_bill(
        self,
        items: Sequence[LineItem],
        customer_name: Optional[str] = None,
        customer_phone: Optional[str] = None,
        discount: Union[Decimal, float, int, str] = Decimal("0"),
    ) -> Bill:
        """
        Persist a bill with its line items and decrement stock for each item.

        Precondition: the inventory ledger's collection is fresh. Stock is
        decremented from the cached value, and items whose medicine is not
        cached are sold without touching stock. No stock check or floor is
        applied here; callers make sure stock suffices.

        Args:
            items: line items; their total_price values are trusted as given
            customer_name: optional customer name
            customer_phone: optional customer phone
            discount: amount subtracted from the total

        Returns:
            The new bill, built from the locally computed totals.

        Raises:
            ValueError: discount is negative (nothing is written)
            StoreError: any store write failed (earlier writes are not undone)
        """
        line_items = [item if isinstance(item, BillItem) else BillItem.model_validate(item) for item in items]
        discount = _to_decimal(discount)
        if discount < 0:
            raise ValueError(f"Discount cannot be negative: {discount}")
        total_amount = sum((item.total_price for item in line_items), Decimal("0"))
        final_amount = total_amount - discount

        # 1. Bill record
        bill_result = await self._store.insert(BILLS, {
            "customer_name": customer_name,
            "customer_phone": customer_phone,
            "total_amount": total_amount,
            "discount": discount,
            "final_amount": final_amount,
        })
        if not bill_result.ok:
            self._fail("Error creating bill", bill_result.error)
            raise bill_result.error
        inserted = bill_result.data
        bill_id = inserted["id"]

        # 2. Line items, one batch
        items_result = await self._store.insert_many(
            BILL_ITEMS, [to_persisted_bill_item(item, bill_id) for item in line_items]
        )
        if not items_result.ok:
            self._fail("Error creating bill items", items_result.error)
            AuditLog.log_partial_failure("bill", bill_id, "bill_items", str(items_result.error))
            raise items_result.error

        # 3. Stock, strictly one item after another in input order
        for item in line_items:
            medicine = self._inventory.get_medicine(item.medicine_id)
            if medicine is None:
                logger.warning(
                    f"Bill {bill_id}: medicine {item.medicine_id} ({item.medicine_name}) "
                    f"not in inventory cache, stock not decremented"
                )
                continue
            try:
                await self._inventory.update_medicine(
                    medicine.id, MedicineUpdate(stock=medicine.stock - item.quantity)
                )
            except StoreError as e:
                AuditLog.log_partial_failure("bill", bill_id, f"stock:{medicine.id}", str(e))
                raise

        bill = Bill(
            id=bill_id,
            items=[item.model_copy(update={"bill_id": bill_id}) for item in line_items],
            total_amount=total_amount,
            discount=discount,
            final_amount=final_amount,
            customer_name=customer_name,
            customer_phone=customer_phone,
            date=inserted.get("date"),
        )
        self._bills.insert(0, bill)
        logger.info(f"Created bill {bill_id}: {len(line_items)} items, final amount {final_amount}")
        AuditLog.log_action("create", "bill", bill_id, changes={
            "total_amount": total_amount,
            "discount": discount,
            "final_amount": final_amount,
        })
        return bill
