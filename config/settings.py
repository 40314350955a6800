"""Environment-driven settings for the remote store and logging."""

import os
from dataclasses import dataclass

from config.defaults import STORE_TIMEOUT_SECONDS


@dataclass
class StoreSettings:
    url: str = ""
    key: str = ""
    schema: str = "public"
    timeout: float = STORE_TIMEOUT_SECONDS

    @property
    def is_configured(self) -> bool:
        return bool(self.url and self.key)


def load_store_settings() -> StoreSettings:
    """Read Supabase connection settings from the environment."""
    key = (
        os.getenv("SUPABASE_SERVICE_ROLE_KEY")
        or os.getenv("SUPABASE_ANON_KEY")
        or os.getenv("SUPABASE_KEY")
        or ""
    )
    try:
        timeout = float(os.getenv("SUPABASE_TIMEOUT", STORE_TIMEOUT_SECONDS))
    except ValueError:
        timeout = STORE_TIMEOUT_SECONDS
    return StoreSettings(
        url=os.getenv("SUPABASE_URL", ""),
        key=key,
        schema=os.getenv("SUPABASE_SCHEMA", "public"),
        timeout=timeout,
    )


def log_level() -> str:
    return os.getenv("CATAS_LOG_LEVEL", "INFO").upper()
