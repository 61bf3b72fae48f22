import os
from functools import lru_cache
from typing import List

from dotenv import load_dotenv


load_dotenv()


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}")


class Settings:
    """Runtime settings read from the environment (and .env, if present)."""

    def __init__(self):
        self.mongodb_uri: str = (
            os.getenv("MONGODB_URI")
            or os.getenv("DATABASE_URL")
            or "mongodb://localhost:27017"
        )
        self.database: str = os.getenv("MONGODB_DB", "batepapo")
        # inactivity window before a participant is evicted
        self.stale_after_ms: int = _int_env("BATEPAPO_STALE_AFTER_MS", 10000)
        self.sweep_interval_s: int = _int_env("BATEPAPO_SWEEP_INTERVAL", 15)
        origins = os.getenv("BATEPAPO_CORS_ORIGINS", "*")
        self.cors_origins: List[str] = [o.strip() for o in origins.split(",") if o.strip()]
        self.log_level: str = os.getenv("BATEPAPO_LOG_LEVEL", "INFO").upper()
        self.host: str = os.getenv("HOST", "0.0.0.0")
        self.port: int = _int_env("PORT", 5000)

        if self.stale_after_ms <= 0:
            raise RuntimeError("BATEPAPO_STALE_AFTER_MS must be positive")
        if self.sweep_interval_s <= 0:
            raise RuntimeError("BATEPAPO_SWEEP_INTERVAL must be positive")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
