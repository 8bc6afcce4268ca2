"""
Inventory ledger: the in-memory medicine collection and its write-through to the store.

The collection is a cache of the remote store, not a source of truth.
Reads degrade gracefully: a failed fetch is reported and the last known
collection is returned. Writes fail loudly: a failed write is reported
and re-raised to the caller. Nothing is retried.
"""
import logging
from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError

from pharmacy_pos.core.audit import AuditLog
from pharmacy_pos.core.config import settings
from pharmacy_pos.core.notifications import Notifier, report_failure
from pharmacy_pos.schemas import Medicine, MedicineCreate, MedicineUpdate
from pharmacy_pos.services.load_state import LoadState
from pharmacy_pos.services.record_mapper import to_client_medicine, to_persisted_medicine
from pharmacy_pos.store.base import MEDICINES, RecordStore

logger = logging.getLogger(__name__)

MedicinePatch = Union[MedicineUpdate, Dict[str, Any]]


class InventoryLedger:
    def __init__(self, store: RecordStore, notifier: Notifier, load_state: LoadState | None = None):
        self._store = store
        self._notifier = notifier
        self._load_state = load_state or LoadState()
        self._medicines: List[Medicine] = []

    @property
    def medicines(self) -> List[Medicine]:
        """Snapshot of the collection, ascending by name as of the last fetch."""
        return list(self._medicines)

    @property
    def load_state(self) -> LoadState:
        return self._load_state

    def _fail(self, title: str, error: Exception) -> None:
        report_failure(self._notifier, title, error)

    # ── remote operations ──────────────────────────────────────

    async def fetch_medicines(self) -> List[Medicine]:
        """Replace the collection wholesale with the store's contents. Never raises for store errors."""
        with self._load_state.tracking(LoadState.MEDICINES):
            result = await self._store.select_all(MEDICINES, order_by="name", ascending=True)
            if not result.ok:
                self._fail("Error fetching medicines", result.error)
                return self.medicines

            try:
                medicines = [to_client_medicine(row) for row in result.data or []]
            except (ValidationError, KeyError) as e:
                self._fail("Error fetching medicines", e)
                return self.medicines

            self._medicines = medicines
            logger.info(f"Fetched {len(medicines)} medicines")
            return self.medicines

    async def add_medicine(self, medicine: Union[MedicineCreate, Dict[str, Any]]) -> Medicine:
        """Insert a medicine and append it to the collection (no re-sort)."""
        if not isinstance(medicine, MedicineCreate):
            medicine = MedicineCreate.model_validate(medicine)

        result = await self._store.insert(MEDICINES, to_persisted_medicine(medicine))
        if not result.ok:
            self._fail("Error adding medicine", result.error)
            raise result.error

        new_medicine = to_client_medicine(result.data)
        self._medicines.append(new_medicine)
        logger.info(f"Added medicine {new_medicine.id} ({new_medicine.name})")
        AuditLog.log_action("create", "medicine", new_medicine.id, changes={"name": new_medicine.name})
        return new_medicine

    async def update_medicine(self, medicine_id: str, patch: MedicinePatch) -> None:
        """
        Apply a partial patch, then re-read the record so the cached entry
        reflects the store's post-update state. The entry keeps its position.

        Raises:
            StoreError: the update or the re-read failed
        """
        if not isinstance(patch, MedicineUpdate):
            patch = MedicineUpdate.model_validate(patch)
        changes = to_persisted_medicine(patch)

        result = await self._store.update(MEDICINES, medicine_id, changes)
        if not result.ok:
            self._fail("Error updating medicine", result.error)
            raise result.error

        fetched = await self._store.select_by_id(MEDICINES, medicine_id)
        if not fetched.ok:
            self._fail("Error fetching updated medicine", fetched.error)
            raise fetched.error

        updated = to_client_medicine(fetched.data)
        self._medicines = [updated if m.id == medicine_id else m for m in self._medicines]
        AuditLog.log_action("update", "medicine", medicine_id, changes=patch.model_dump(exclude_unset=True))

    async def delete_medicine(self, medicine_id: str) -> None:
        result = await self._store.delete(MEDICINES, medicine_id)
        if not result.ok:
            self._fail("Error deleting medicine", result.error)
            raise result.error

        self._medicines = [m for m in self._medicines if m.id != medicine_id]
        logger.info(f"Deleted medicine {medicine_id}")
        AuditLog.log_action("delete", "medicine", medicine_id)

    # ── in-memory queries ──────────────────────────────────────

    def get_medicine(self, medicine_id: str) -> Optional[Medicine]:
        """Cache lookup only; never touches the store."""
        for medicine in self._medicines:
            if medicine.id == medicine_id:
                return medicine
        return None

    def search_medicines(self, term: str) -> List[Medicine]:
        """Case-insensitive match on name, manufacturer, category or shelf number."""
        needle = (term or "").strip().lower()
        if not needle:
            return self.medicines
        return [
            m for m in self._medicines
            if any(
                value and needle in value.lower()
                for value in (m.name, m.manufacturer, m.category, m.shelf_number)
            )
        ]

    def low_stock(self, threshold: int | None = None) -> List[Medicine]:
        """Medicines below the stock threshold, lowest stock first."""
        if threshold is None:
            threshold = settings.LOW_STOCK_THRESHOLD
        return sorted((m for m in self._medicines if m.stock < threshold), key=lambda m: m.stock)

    def expiring_within(self, days: int | None = None, today: date | None = None) -> List[Medicine]:
        """Medicines expiring between today and today + days, soonest first."""
        if days is None:
            days = settings.EXPIRY_ALERT_DAYS
        today = today or date.today()
        alert_date = today + timedelta(days=days)
        return sorted(
            (m for m in self._medicines if today <= m.expiry_date <= alert_date),
            key=lambda m: m.expiry_date,
        )
