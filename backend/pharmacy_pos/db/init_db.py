"""Create all record store tables. Run once before using the SQL store."""
from sqlalchemy.engine import Engine

from pharmacy_pos.db.base import Base
from pharmacy_pos.models import medicine, bill  # noqa: F401 - register models


def init_db(bind: Engine | None = None) -> None:
    if bind is None:
        from pharmacy_pos.db.session import engine as bind
    Base.metadata.create_all(bind=bind)
