"""
Remote store adapter contract.

The core only sees named collections with CRUD operations. Every
operation resolves to a StoreResult: either a payload or a StoreError,
never both. Adapters do not raise for remote failures.
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol

from pharmacy_pos.core.exceptions import StoreError

MEDICINES = "medicines"
BILLS = "bills"
BILL_ITEMS = "bill_items"

Record = Dict[str, Any]


@dataclass(frozen=True)
class StoreResult:
    data: Any = None
    error: Optional[StoreError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, data: Any = None) -> "StoreResult":
        return cls(data=data)

    @classmethod
    def failure(cls, error: StoreError) -> "StoreResult":
        return cls(error=error)

    def unwrap(self) -> Any:
        """Return the payload or raise the carried error."""
        if self.error is not None:
            raise self.error
        return self.data


class RecordStore(Protocol):
    async def select_all(self, collection: str, order_by: str, ascending: bool = True) -> StoreResult:
        """All records of a collection ordered by one field. Payload: List[Record]."""
        ...

    async def select_where(self, collection: str, field: str, value: Any) -> StoreResult:
        """Records whose field equals value. Payload: List[Record]."""
        ...

    async def select_by_id(self, collection: str, record_id: str) -> StoreResult:
        """Exactly one record. RecordNotFound when missing. Payload: Record."""
        ...

    async def insert(self, collection: str, record: Record) -> StoreResult:
        """Insert one record. Payload: the stored record with server-assigned fields."""
        ...

    async def insert_many(self, collection: str, records: List[Record]) -> StoreResult:
        """Insert a batch of records. Payload: None."""
        ...

    async def update(self, collection: str, record_id: str, changes: Record) -> StoreResult:
        """Partial update by id. RecordNotFound when missing. Payload: None."""
        ...

    async def delete(self, collection: str, record_id: str) -> StoreResult:
        """Delete by id. RecordNotFound when missing. Payload: None."""
        ...
