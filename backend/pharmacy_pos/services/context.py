"""Per-session wiring of the store, ledger, billing engine and load state."""
from dataclasses import dataclass

from pharmacy_pos.core.notifications import LogNotifier, Notifier
from pharmacy_pos.services.billing_service import BillingEngine
from pharmacy_pos.services.inventory_service import InventoryLedger
from pharmacy_pos.services.load_state import LoadState
from pharmacy_pos.store import RecordStore, build_store


@dataclass
class PharmacyContext:
    store: RecordStore
    notifier: Notifier
    load_state: LoadState
    inventory: InventoryLedger
    billing: BillingEngine

    async def refresh(self) -> None:
        """Fetch medicines, then bills."""
        await self.inventory.fetch_medicines()
        await self.billing.fetch_bills()


def build_context(store: RecordStore | None = None, notifier: Notifier | None = None) -> PharmacyContext:
    """Build one context per process or session. The store defaults to the configured backend."""
    store = store or build_store()
    notifier = notifier or LogNotifier()
    load_state = LoadState()
    inventory = InventoryLedger(store, notifier, load_state)
    billing = BillingEngine(store, inventory, notifier, load_state)
    return PharmacyContext(
        store=store,
        notifier=notifier,
        load_state=load_state,
        inventory=inventory,
        billing=billing,
    )
