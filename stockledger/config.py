from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # ==============================
    # Application
    # ==============================
    APP_NAME: str = "Stock Ledger"
    ENVIRONMENT: str = "local"

    # ==============================
    # Database
    # ==============================
    DATABASE_URL: str = "sqlite:///./stockledger.db"

    # ==============================
    # Logging
    # ==============================
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # ==============================
    # Stock reporting
    # ==============================
    STOCK_LOOKBACK_DAYS: int = 30
    STOCK_PAGE_SIZE: int = 50
    STOCK_MAX_PAGE_SIZE: int = 500
    STOCK_QUERY_CACHE_SIZE: int = 32

    # ==============================
    # Scheduler
    # ==============================
    SCHEDULER_ENABLED: bool = True
    CARRY_FORWARD_TIME: str = "00:05"
    SCHEDULER_POLL_SECONDS: int = 30
    SCHEDULER_TZ: str = "local"


@lru_cache
def get_settings() -> Settings:
    """Cached settings loader (once per process)."""
    return Settings()


__all__ = ["Settings", "get_settings"]
