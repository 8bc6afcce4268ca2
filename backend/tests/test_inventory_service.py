"""Inventory ledger tests."""
import json
import logging
from datetime import date
from decimal import Decimal

import pytest

from pharmacy_pos.core.exceptions import RecordNotFound, StoreError
from pharmacy_pos.schemas import MedicineCreate, MedicineUpdate
from pharmacy_pos.store.base import MEDICINES
from tests.fakes import medicine_row, run


def _ids(medicines):
    return [m.id for m in medicines]


class TestFetchMedicines:
    def test_fetch_orders_by_name(self, store, ledger):
        store.seed(MEDICINES, medicine_row("m2", "Zinc"), medicine_row("m1", "Aspirin"), medicine_row("m3", "Ibuprofen"))

        medicines = run(ledger.fetch_medicines())

        assert [m.name for m in medicines] == ["Aspirin", "Ibuprofen", "Zinc"]
        assert store.ops("select_all") == [("select_all", MEDICINES, "name")]

    def test_fetch_replaces_collection(self, store, ledger):
        store.seed(MEDICINES, medicine_row("m1", "Aspirin"), medicine_row("m2", "Zinc"))
        run(ledger.fetch_medicines())

        store.collections[MEDICINES] = [medicine_row("m9", "Cetirizine")]
        medicines = run(ledger.fetch_medicines())

        assert _ids(medicines) == ["m9"]
        assert _ids(ledger.medicines) == ["m9"]

    def test_fetch_failure_returns_stale_collection(self, store, ledger, notifier):
        store.seed(MEDICINES, medicine_row("m1", "Aspirin"))
        run(ledger.fetch_medicines())
        store.fail_on("select_all", MEDICINES, message="service unavailable")

        medicines = run(ledger.fetch_medicines())

        assert _ids(medicines) == ["m1"]
        assert notifier.titles == ["Error fetching medicines"]
        assert notifier.notifications[0].description == "service unavailable"
        assert notifier.notifications[0].variant == "destructive"
        assert ledger.load_state.medicines is False

    def test_loading_flag_set_while_in_flight(self, store, ledger):
        seen = []
        store.on_call = lambda op, collection: seen.append(ledger.load_state.medicines)

        run(ledger.fetch_medicines())

        assert seen == [True]
        assert ledger.load_state.medicines is False
        assert ledger.load_state.bills is False

    def test_malformed_row_is_reported_not_raised(self, store, ledger, notifier):
        store.seed(MEDICINES, {"id": "m1", "name": "Broken"})

        assert run(ledger.fetch_medicines()) == []
        assert notifier.titles == ["Error fetching medicines"]


class TestAddMedicine:
    def test_add_appends_without_resorting(self, store, ledger):
        store.seed(MEDICINES, medicine_row("m1", "Zinc"))
        run(ledger.fetch_medicines())

        added = run(ledger.add_medicine(MedicineCreate(
            name="Aspirin", price=Decimal("5.00"), stock=20, expiry_date=date(2027, 1, 1),
        )))

        assert added.id.startswith("medicines-")
        assert added.created_at is not None and added.updated_at is not None
        assert [m.name for m in ledger.medicines] == ["Zinc", "Aspirin"]
        assert store.ops("insert")[0][2]["name"] == "Aspirin"

    def test_add_accepts_client_shape(self, ledger):
        added = run(ledger.add_medicine({
            "name": "Aspirin", "price": "5.00", "stock": 20,
            "expiryDate": "2027-01-01", "shelfNumber": "A3",
        }))
        assert added.shelf_number == "A3"
        assert added.expiry_date == date(2027, 1, 1)

    def test_add_failure_raises_and_leaves_collection(self, store, ledger, notifier):
        store.fail_on("insert", MEDICINES, message="duplicate")

        with pytest.raises(StoreError, match="duplicate"):
            run(ledger.add_medicine(MedicineCreate(
                name="Aspirin", price=Decimal("5.00"), stock=1, expiry_date=date(2027, 1, 1),
            )))

        assert ledger.medicines == []
        assert notifier.titles == ["Error adding medicine"]

    def test_negative_stock_rejected_before_store(self, store, ledger):
        with pytest.raises(ValueError):
            run(ledger.add_medicine({"name": "Aspirin", "price": "1", "stock": -1, "expiry_date": "2027-01-01"}))
        assert store.calls == []


class TestUpdateMedicine:
    def _load(self, store, ledger):
        store.seed(MEDICINES, medicine_row("m1", "Aspirin", stock=20), medicine_row("m2", "Ibuprofen"),
                   medicine_row("m3", "Zinc"))
        run(ledger.fetch_medicines())

    def test_update_writes_patch_and_refetches(self, store, ledger):
        self._load(store, ledger)
        before = ledger.get_medicine("m2")

        run(ledger.update_medicine("m2", MedicineUpdate(stock=3)))

        op, collection, (record_id, changes) = store.ops("update")[0]
        assert record_id == "m2"
        assert set(changes) == {"stock", "updated_at"}
        assert store.ops("select_by_id") == [("select_by_id", MEDICINES, "m2")]
        after = ledger.get_medicine("m2")
        assert after.stock == 3
        assert after.updated_at > before.updated_at
        assert _ids(ledger.medicines) == ["m1", "m2", "m3"]

    def test_update_uses_store_state_after_write(self, store, ledger):
        self._load(store, ledger)
        # A concurrent writer changed the name remotely
        store.collections[MEDICINES][1]["name"] = "Ibuprofen 400mg"

        run(ledger.update_medicine("m2", {"price": "7.25"}))

        medicine = ledger.get_medicine("m2")
        assert medicine.name == "Ibuprofen 400mg"
        assert medicine.price == Decimal("7.25")

    def test_update_failure_raises(self, store, ledger, notifier):
        self._load(store, ledger)
        store.fail_on("update", MEDICINES)

        with pytest.raises(StoreError):
            run(ledger.update_medicine("m1", MedicineUpdate(stock=0)))

        assert ledger.get_medicine("m1").stock == 20
        assert store.ops("select_by_id") == []
        assert notifier.titles == ["Error updating medicine"]

    def test_refetch_failure_raises(self, store, ledger, notifier):
        self._load(store, ledger)
        store.fail_on("select_by_id", MEDICINES)

        with pytest.raises(StoreError):
            run(ledger.update_medicine("m1", MedicineUpdate(stock=0)))

        assert ledger.get_medicine("m1").stock == 20
        assert notifier.titles == ["Error fetching updated medicine"]

    def test_update_writes_audit_entry(self, store, ledger, caplog):
        self._load(store, ledger)

        with caplog.at_level(logging.INFO, logger="audit"):
            run(ledger.update_medicine("m1", MedicineUpdate(stock=5)))

        entries = [json.loads(r.getMessage()) for r in caplog.records if r.name == "audit"]
        assert entries[-1]["event_type"] == "medicine.update"
        assert entries[-1]["changes"] == {"stock": 5}

    def test_negative_price_patch_rejected_before_store(self, store, ledger):
        store.seed(MEDICINES, medicine_row("m1", "Aspirin", price="5.00"))
        run(ledger.fetch_medicines())
        store.calls.clear()

        with pytest.raises(ValueError):
            run(ledger.update_medicine("m1", {"price": "-0.50"}))

        assert store.calls == []
        assert ledger.get_medicine("m1").price == Decimal("5.00")


class TestDeleteMedicine:
    def test_delete_removes_entry(self, store, ledger):
        store.seed(MEDICINES, medicine_row("m1", "Aspirin"), medicine_row("m2", "Zinc"))
        run(ledger.fetch_medicines())

        run(ledger.delete_medicine("m1"))

        assert _ids(ledger.medicines) == ["m2"]
        assert store.collections[MEDICINES][0]["id"] == "m2"

    def test_delete_unknown_id_raises_and_keeps_collection(self, store, ledger, notifier):
        store.seed(MEDICINES, medicine_row("m1", "Aspirin"))
        run(ledger.fetch_medicines())

        with pytest.raises(RecordNotFound):
            run(ledger.delete_medicine("nope"))

        assert _ids(ledger.medicines) == ["m1"]
        assert notifier.titles == ["Error deleting medicine"]


class TestInMemoryQueries:
    def _load(self, store, ledger):
        store.seed(
            MEDICINES,
            medicine_row("m1", "Aspirin", stock=4, manufacturer="Bayer", category="Analgesic",
                         expiry_date=date(2026, 11, 1)),
            medicine_row("m2", "Cetirizine", stock=50, category="Antihistamine", shelf_number="C1",
                         expiry_date=date(2026, 10, 25)),
            medicine_row("m3", "Zinc", stock=0, expiry_date=date(2028, 1, 1)),
        )
        run(ledger.fetch_medicines())
        store.calls.clear()

    def test_get_medicine_is_cache_only(self, store, ledger):
        self._load(store, ledger)

        assert ledger.get_medicine("m2").name == "Cetirizine"
        assert ledger.get_medicine("missing") is None
        assert store.calls == []

    def test_search_matches_any_text_field(self, store, ledger):
        self._load(store, ledger)

        assert _ids(ledger.search_medicines("bayer")) == ["m1"]
        assert _ids(ledger.search_medicines("ANTI")) == ["m2"]
        assert _ids(ledger.search_medicines("c1")) == ["m2"]
        assert _ids(ledger.search_medicines("  ")) == ["m1", "m2", "m3"]
        assert ledger.search_medicines("xyz") == []

    def test_low_stock_sorted_ascending(self, store, ledger):
        self._load(store, ledger)

        assert _ids(ledger.low_stock(threshold=20)) == ["m3", "m1"]
        assert _ids(ledger.low_stock(threshold=0)) == []

    def test_expiring_within_window(self, store, ledger):
        self._load(store, ledger)

        expiring = ledger.expiring_within(days=30, today=date(2026, 10, 19))

        assert _ids(expiring) == ["m2", "m1"]
        assert ledger.expiring_within(days=30, today=date(2026, 11, 2)) == []
