"""
Application settings, read from the environment (and ``.env``) by
pydantic-settings.

Each group has its own prefix: ``STORAGE_`` for the database, ``LEDGER_``
for engine behavior, ``API_`` for the HTTP server.
"""

from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Where the ledger database lives and how it is pooled."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    data_dir: Path = Path("data")
    db_name: str = "ricestock.db"
    pool_size: int = Field(default=5, ge=1)
    # ms a writer waits on BEGIN IMMEDIATE before failing with "database is locked"
    busy_timeout: int = Field(default=30000, ge=0)

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name


class LedgerSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="LEDGER_")

    # Lot stock level bands, percent of the variety minimum stock level
    low_stock_pct: float = 25.0
    medium_stock_pct: float = 50.0

    transfer_batch_suffix: str = "-TR"
    default_payment_method: str = "cash"
    entries_limit: int = Field(default=200, ge=1, le=5000)

    @field_validator("transfer_batch_suffix")
    @classmethod
    def suffix_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("transfer_batch_suffix must not be blank")
        return v

    @field_validator("default_payment_method")
    @classmethod
    def normalize_payment_method(cls, v: str) -> str:
        return v.strip().lower()

    @model_validator(mode="after")
    def check_thresholds(self) -> "LedgerSettings":
        if not 0 < self.low_stock_pct <= self.medium_stock_pct:
            raise ValueError("low_stock_pct must be positive and not above medium_stock_pct")
        return self


class APISettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    cors_origins: list[str] = ["*"]


class Settings(BaseSettings):
    """Root settings; sub-groups read their own prefixes."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Rice Stock Ledger"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    storage: StorageSettings = Field(default_factory=StorageSettings)
    ledger: LedgerSettings = Field(default_factory=LedgerSettings)
    api: APISettings = Field(default_factory=APISettings)

    @field_validator("storage", mode="before")
    @classmethod
    def ensure_data_dir(cls, v: Any) -> StorageSettings:
        storage = StorageSettings(**v) if isinstance(v, dict) else (v or StorageSettings())
        storage.data_dir.mkdir(parents=True, exist_ok=True)
        return storage


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
