from pharmacy_pos.services.billing_service import BillingEngine
from pharmacy_pos.services.context import PharmacyContext, build_context
from pharmacy_pos.services.inventory_service import InventoryLedger
from pharmacy_pos.services.load_state import LoadState

__all__ = ["BillingEngine", "InventoryLedger", "LoadState", "PharmacyContext", "build_context"]
