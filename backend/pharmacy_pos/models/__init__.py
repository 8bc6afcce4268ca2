from pharmacy_pos.models.medicine import MedicineModel
from pharmacy_pos.models.bill import BillModel, BillItemModel

__all__ = ["MedicineModel", "BillModel", "BillItemModel"]
