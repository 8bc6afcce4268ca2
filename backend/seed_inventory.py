"""Seed the SQL record store with a starter pharmacy inventory."""
import asyncio
from datetime import date, timedelta
from decimal import Decimal

from pharmacy_pos.core.config import configure_logging, settings
from pharmacy_pos.core.exceptions import StoreError
from pharmacy_pos.core.notifications import MemoryNotifier
from pharmacy_pos.db.init_db import init_db
from pharmacy_pos.db.session import make_engine, make_session_factory
from pharmacy_pos.schemas import MedicineCreate
from pharmacy_pos.services import build_context
from pharmacy_pos.store import SqlRecordStore

MEDICINES = [
    # name, manufacturer, category, price, stock, shelf, months to expiry
    ("Paracetamol 500mg", "GSK", "Analgesic", "2.50", 200, "A1", 18),
    ("Dolo 650", "Micro Labs", "Analgesic", "3.00", 180, "A1", 12),
    ("Azithromycin 500mg", "Cipla", "Antibiotic", "15.00", 80, "B2", 9),
    ("Amoxicillin 500mg", "Sun Pharma", "Antibiotic", "8.00", 100, "B2", 10),
    ("Cetirizine 10mg", "Dr. Reddy's", "Antihistamine", "1.50", 250, "C1", 24),
    ("Pantoprazole 40mg", "Alkem", "Antacid", "6.00", 120, "C3", 15),
    ("Metformin 500mg", "USV", "Antidiabetic", "1.00", 200, "D1", 20),
    ("Amlodipine 5mg", "Cipla", "Antihypertensive", "2.50", 150, "D2", 16),
    ("Ibuprofen 400mg", "Abbott", "Analgesic", "3.50", 140, "A2", 14),
    ("Vitamin D3 60K", "Mankind", "Supplement", "35.00", 15, "E1", 1),
]


async def seed_inventory():
    engine = make_engine(settings.DATABASE_URL)
    init_db(engine)

    notifier = MemoryNotifier()
    context = build_context(SqlRecordStore(make_session_factory(engine)), notifier)
    existing = {m.name for m in await context.inventory.fetch_medicines()}

    today = date.today()
    added = 0
    for name, manufacturer, category, price, stock, shelf, months in MEDICINES:
        if name in existing:
            continue
        try:
            await context.inventory.add_medicine(MedicineCreate(
                name=name,
                manufacturer=manufacturer,
                category=category,
                price=Decimal(price),
                stock=stock,
                expiry_date=today + timedelta(days=30 * months),
                shelf_number=shelf,
            ))
            added += 1
        except StoreError as e:
            print(f"❌ Could not add {name}: {e}")

    print(f"✅ Added {added} medicines ({len(existing)} already present)")
    low = context.inventory.low_stock()
    if low:
        print(f"⚠️  Low stock: {', '.join(m.name for m in low)}")


if __name__ == "__main__":
    configure_logging()
    asyncio.run(seed_inventory())
