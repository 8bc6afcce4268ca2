"""Record store backed by SQLAlchemy table models.

Each operation opens its own session and runs in a worker thread so the
event loop is never blocked by the database driver.
"""
import asyncio
import logging
from typing import Any, Callable, Dict, List, Type

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from pharmacy_pos.core.exceptions import RecordNotFound, StoreError
from pharmacy_pos.models import BillItemModel, BillModel, MedicineModel
from pharmacy_pos.store.base import BILL_ITEMS, BILLS, MEDICINES, Record, StoreResult

logger = logging.getLogger(__name__)

COLLECTIONS: Dict[str, Type] = {
    MEDICINES: MedicineModel,
    BILLS: BillModel,
    BILL_ITEMS: BillItemModel,
}


def _to_record(obj) -> Record:
    return {c.name: getattr(obj, c.name) for c in obj.__table__.columns}


class SqlRecordStore:
    def __init__(self, session_factory: sessionmaker | None = None):
        if session_factory is None:
            from pharmacy_pos.db.session import SessionLocal as session_factory
        self._session_factory = session_factory

    # ── helpers ────────────────────────────────────────────────

    def _model(self, collection: str) -> Type:
        model = COLLECTIONS.get(collection)
        if model is None:
            raise StoreError(f"Unknown collection '{collection}'", code="unknown_collection", collection=collection)
        return model

    def _check_fields(self, model: Type, collection: str, fields) -> None:
        columns = set(model.__table__.columns.keys())
        unknown = sorted(set(fields) - columns)
        if unknown:
            raise StoreError(
                f"Unknown field(s) for '{collection}': {', '.join(unknown)}",
                code="unknown_field",
                collection=collection,
            )

    def _run(self, collection: str, work: Callable[[Session], Any]) -> StoreResult:
        db = self._session_factory()
        try:
            return StoreResult.success(work(db))
        except StoreError as e:
            db.rollback()
            return StoreResult.failure(e)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Database error on '{collection}': {type(e).__name__}: {e}")
            return StoreResult.failure(
                StoreError(str(e.__cause__ or e), code=type(e).__name__, collection=collection)
            )
        finally:
            db.close()

    async def _call(self, collection: str, work: Callable[[Session], Any]) -> StoreResult:
        return await asyncio.to_thread(self._run, collection, work)

    # ── RecordStore ────────────────────────────────────────────

    async def select_all(self, collection: str, order_by: str, ascending: bool = True) -> StoreResult:
        def work(db: Session) -> List[Record]:
            model = self._model(collection)
            self._check_fields(model, collection, [order_by])
            column = getattr(model, order_by)
            rows = db.query(model).order_by(column.asc() if ascending else column.desc()).all()
            return [_to_record(r) for r in rows]

        return await self._call(collection, work)

    async def select_where(self, collection: str, field: str, value: Any) -> StoreResult:
        def work(db: Session) -> List[Record]:
            model = self._model(collection)
            self._check_fields(model, collection, [field])
            rows = db.query(model).filter(getattr(model, field) == value).all()
            return [_to_record(r) for r in rows]

        return await self._call(collection, work)

    async def select_by_id(self, collection: str, record_id: str) -> StoreResult:
        def work(db: Session) -> Record:
            obj = db.get(self._model(collection), record_id)
            if obj is None:
                raise RecordNotFound(collection, record_id)
            return _to_record(obj)

        return await self._call(collection, work)

    async def insert(self, collection: str, record: Record) -> StoreResult:
        def work(db: Session) -> Record:
            model = self._model(collection)
            self._check_fields(model, collection, record)
            obj = model(**record)
            db.add(obj)
            db.commit()
            db.refresh(obj)
            return _to_record(obj)

        return await self._call(collection, work)

    async def insert_many(self, collection: str, records: List[Record]) -> StoreResult:
        def work(db: Session) -> None:
            model = self._model(collection)
            for record in records:
                self._check_fields(model, collection, record)
            db.add_all([model(**record) for record in records])
            db.commit()

        return await self._call(collection, work)

    async def update(self, collection: str, record_id: str, changes: Record) -> StoreResult:
        def work(db: Session) -> None:
            model = self._model(collection)
            self._check_fields(model, collection, changes)
            obj = db.get(model, record_id)
            if obj is None:
                raise RecordNotFound(collection, record_id)
            for key, value in changes.items():
                setattr(obj, key, value)
            db.commit()

        return await self._call(collection, work)

    async def delete(self, collection: str, record_id: str) -> StoreResult:
        def work(db: Session) -> None:
            obj = db.get(self._model(collection), record_id)
            if obj is None:
                raise RecordNotFound(collection, record_id)
            db.delete(obj)
            db.commit()

        return await self._call(collection, work)
