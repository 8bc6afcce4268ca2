from pharmacy_pos.schemas.medicine import Medicine, MedicineCreate, MedicineUpdate
from pharmacy_pos.schemas.bill import Bill, BillItem

__all__ = ["Medicine", "MedicineCreate", "MedicineUpdate", "Bill", "BillItem"]
