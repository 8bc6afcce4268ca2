import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, Date, DateTime, Integer, Numeric, String, Text

from pharmacy_pos.db.base import Base


def new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MedicineModel(Base):
    """Pharmacy stock record. id and timestamps are assigned by the store."""
    __tablename__ = "medicines"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False, index=True)
    manufacturer = Column(String(255), nullable=True)
    price = Column(Numeric(10, 2), nullable=False, default=0)
    stock = Column(Integer, nullable=False, default=0)
    expiry_date = Column(Date, nullable=False)
    category = Column(String(128), nullable=True)
    description = Column(Text, nullable=True)
    shelf_number = Column(String(32), nullable=True)  # Free-text location code
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow)
