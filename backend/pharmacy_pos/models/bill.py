from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String

from pharmacy_pos.db.base import Base
from pharmacy_pos.models.medicine import new_id, utcnow


class BillModel(Base):
    __tablename__ = "bills"

    id = Column(String(36), primary_key=True, default=new_id)
    customer_name = Column(String(255), nullable=True)
    customer_phone = Column(String(64), nullable=True)
    date = Column(DateTime(timezone=True), default=utcnow, index=True)
    total_amount = Column(Numeric(12, 2), nullable=False)
    discount = Column(Numeric(12, 2), nullable=True, default=0)
    final_amount = Column(Numeric(12, 2), nullable=False)


class BillItemModel(Base):
    """One line of a bill. medicine_id is a plain reference, not a foreign key: a bill outlives its medicines."""
    __tablename__ = "bill_items"

    id = Column(String(36), primary_key=True, default=new_id)
    bill_id = Column(String(36), ForeignKey("bills.id", ondelete="CASCADE"), nullable=False, index=True)
    medicine_id = Column(String(36), nullable=False)
    medicine_name = Column(String(255), nullable=False)  # Snapshot at sale time
    quantity = Column(Integer, nullable=False)
    price_per_unit = Column(Numeric(10, 2), nullable=False)
    total_price = Column(Numeric(12, 2), nullable=False)
