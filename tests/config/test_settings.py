"""Tests for environment-driven settings."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from ricestock.config import get_settings, reset_settings
from ricestock.config.settings import LedgerSettings


class TestSettings:
    def test_defaults(self, tmp_path: Path):
        settings = get_settings()

        assert settings.storage.db_path == tmp_path / "data" / "ricestock.db"
        assert settings.ledger.transfer_batch_suffix == "-TR"
        assert settings.ledger.default_payment_method == "cash"
        assert settings.ledger.low_stock_pct == 25.0
        assert settings.ledger.medium_stock_pct == 50.0

    def test_creates_data_dir(self, tmp_path: Path):
        get_settings()
        assert (tmp_path / "data").is_dir()

    def test_cached_until_reset(self, monkeypatch: pytest.MonkeyPatch):
        first = get_settings()
        assert get_settings() is first

        monkeypatch.setenv("LEDGER_ENTRIES_LIMIT", "50")
        reset_settings()

        assert get_settings() is not first
        assert get_settings().ledger.entries_limit == 50

    def test_storage_env(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("STORAGE_POOL_SIZE", "3")
        monkeypatch.setenv("STORAGE_BUSY_TIMEOUT", "1500")
        reset_settings()

        storage = get_settings().storage
        assert storage.pool_size == 3
        assert storage.busy_timeout == 1500


class TestLedgerSettings:
    def test_thresholds_must_be_ordered(self):
        with pytest.raises(ValidationError):
            LedgerSettings(low_stock_pct=60, medium_stock_pct=50)

    def test_low_threshold_must_be_positive(self):
        with pytest.raises(ValidationError):
            LedgerSettings(low_stock_pct=0)
