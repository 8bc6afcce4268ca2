"""Remote store adapters."""
from pharmacy_pos.core.config import Settings, settings as default_settings
from pharmacy_pos.store.base import BILL_ITEMS, BILLS, MEDICINES, RecordStore, StoreResult
from pharmacy_pos.store.rest_store import RestRecordStore
from pharmacy_pos.store.sql_store import SqlRecordStore


def build_store(settings: Settings | None = None) -> RecordStore:
    """Build the adapter selected by STORE_BACKEND."""
    settings = settings or default_settings
    settings.validate_store()
    if settings.STORE_BACKEND == "rest":
        return RestRecordStore(
            settings.STORE_URL,
            settings.STORE_API_KEY,
            timeout=settings.STORE_TIMEOUT_SECONDS,
        )
    from pharmacy_pos.db.session import make_engine, make_session_factory

    return SqlRecordStore(make_session_factory(make_engine(settings.DATABASE_URL)))


__all__ = [
    "BILL_ITEMS",
    "BILLS",
    "MEDICINES",
    "RecordStore",
    "RestRecordStore",
    "SqlRecordStore",
    "StoreResult",
    "build_store",
]
