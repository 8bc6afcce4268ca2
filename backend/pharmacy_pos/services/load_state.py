"""In-flight fetch tracking for loading indicators."""
from contextlib import contextmanager
from dataclasses import dataclass


@dataclass
class LoadState:
    medicines: bool = False
    bills: bool = False

    MEDICINES = "medicines"
    BILLS = "bills"

    @contextmanager
    def tracking(self, family: str):
        """Mark a fetch family as loading for the duration of the block, whatever its outcome."""
        if family not in (self.MEDICINES, self.BILLS):
            raise ValueError(f"Unknown fetch family: {family}")
        setattr(self, family, True)
        try:
            yield self
        finally:
            setattr(self, family, False)

    def is_loading(self, family: str | None = None) -> bool:
        if family is None:
            return self.medicines or self.bills
        return getattr(self, family)
