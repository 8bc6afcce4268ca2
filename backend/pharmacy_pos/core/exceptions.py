"""
Exceptions raised by the inventory and billing core.

Remote store adapters never raise for remote failures; they return a
StoreResult carrying a StoreError. Services raise that error after
reporting it (write paths) or swallow it (read paths).
"""
from typing import Any, Optional


class PharmacyError(Exception):
    """Base class for all pharmacy_pos errors."""


class ConfigurationError(PharmacyError):
    """Settings are missing or inconsistent."""


class StoreError(PharmacyError):
    """
    Uniform failure signal from the remote record store.

    Callers treat every StoreError the same way; `code` and `details`
    are kept for logging only.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Any = None,
        collection: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details
        self.collection = collection

    def __repr__(self) -> str:
        return f"{type(self).__name__}(message={self.message!r}, code={self.code!r}, collection={self.collection!r})"


class RecordNotFound(StoreError):
    """A single-row fetch, update or delete matched no record."""

    def __init__(self, collection: str, record_id: Any):
        super().__init__(
            f"No record with id '{record_id}' in '{collection}'",
            code="not_found",
            collection=collection,
        )
        self.record_id = record_id
