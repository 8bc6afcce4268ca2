"""Application configuration.

Environment variables override all defaults. A `.env` file next to the
backend directory is loaded for local development without overriding
variables that are already set.
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

from pharmacy_pos.core.exceptions import ConfigurationError

_BACKEND_DIR = Path(__file__).resolve().parents[2]
load_dotenv(dotenv_path=_BACKEND_DIR / ".env", override=False)


class Settings:
    # Remote store selection: "sql" (SQLAlchemy) or "rest" (PostgREST/Supabase)
    STORE_BACKEND: str = os.getenv("STORE_BACKEND", "sql").lower()

    # SQL record store
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./pharmacy.db")

    # REST record store (must be set via .env, never in code)
    STORE_URL: str = os.getenv("STORE_URL", "")
    STORE_API_KEY: str = os.getenv("STORE_API_KEY", "")
    STORE_TIMEOUT_SECONDS: float = float(os.getenv("STORE_TIMEOUT_SECONDS", "10"))

    # Inventory alerts
    LOW_STOCK_THRESHOLD: int = int(os.getenv("LOW_STOCK_THRESHOLD", "20"))
    EXPIRY_ALERT_DAYS: int = int(os.getenv("EXPIRY_ALERT_DAYS", "30"))

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    DEBUG: bool = ENVIRONMENT == "development"

    def validate_store(self) -> None:
        """Fail fast when the selected store backend is not configured."""
        if self.STORE_BACKEND not in ("sql", "rest"):
            raise ConfigurationError(
                f"Unknown STORE_BACKEND '{self.STORE_BACKEND}'. Use 'sql' or 'rest'."
            )
        if self.STORE_BACKEND == "rest" and not (self.STORE_URL and self.STORE_API_KEY):
            raise ConfigurationError(
                "STORE_URL and STORE_API_KEY must be set when STORE_BACKEND=rest"
            )


settings = Settings()


def configure_logging(level: str | None = None) -> None:
    """Configure root logging for scripts. Library code only uses module loggers."""
    logging.basicConfig(
        level=level or settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
