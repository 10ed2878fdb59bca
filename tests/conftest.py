"""Pytest configuration and shared fixtures."""

from collections.abc import AsyncGenerator, Generator
from pathlib import Path
from unittest.mock import MagicMock, patch

import aiosqlite
import pytest

from ricestock.config import reset_settings
from ricestock.infrastructure.storage.sqlite import connection as conn_module
from ricestock.infrastructure.storage.sqlite.connection import close_pool
from ricestock.infrastructure.storage.sqlite.migrations.migrator import initialize_database


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Point settings at a per-test data directory and drop the cached instance."""
    monkeypatch.setenv("STORAGE_DATA_DIR", str(tmp_path / "data"))
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Create a temporary database path."""
    return tmp_path / "test.db"


@pytest.fixture
async def migrated_db(temp_db_path: Path) -> Path:
    """Temporary database with the full schema applied by the real migrator."""
    results = await initialize_database(temp_db_path, create_backup_before=False)
    assert results and all(r.success for r in results)
    return temp_db_path


@pytest.fixture
async def seeded_db(migrated_db: Path) -> Path:
    """
    Migrated database with master data.

    Warehouses: 1 Main (1000 kg), 2 North Depot (500 kg), 3 Old Shed (inactive).
    Varieties: 1 Basmati (minimum 100 kg), 2 Jasmine (no minimum).
    Suppliers: 1 Delta Mills.
    """
    async with aiosqlite.connect(migrated_db) as conn:
        await conn.executemany(
            "INSERT INTO warehouses (id, name, location, capacity, manager_name, status) "
            "VALUES (?, ?, ?, ?, ?, ?)",
            [
                (1, "Main Warehouse", "Dhaka", "1000", "Rahim", "active"),
                (2, "North Depot", "Rajshahi", "500", "Karim", "active"),
                (3, "Old Shed", "Khulna", "200", None, "inactive"),
            ],
        )
        await conn.executemany(
            "INSERT INTO rice_varieties (id, name, type, minimum_stock_level) VALUES (?, ?, ?, ?)",
            [
                (1, "Basmati", "long grain", "100"),
                (2, "Jasmine", "fragrant", "0"),
            ],
        )
        await conn.execute(
            "INSERT INTO suppliers (id, name, contact_person, phone) VALUES (?, ?, ?, ?)",
            (1, "Delta Mills", "Mr. Hasan", "01700000000"),
        )
        await conn.commit()
    return migrated_db


@pytest.fixture
def mock_settings(temp_db_path: Path):
    """Mock settings with temp database path."""
    mock = MagicMock()
    mock.storage.db_path = temp_db_path
    mock.storage.pool_size = 2
    mock.storage.busy_timeout = 5000
    return mock


@pytest.fixture
async def ledger_db(seeded_db: Path, mock_settings) -> AsyncGenerator[Path, None]:
    """Seeded database wired into the global connection pool."""
    with patch.object(conn_module, "get_settings", return_value=mock_settings):
        conn_module._pool = None
        try:
            yield seeded_db
        finally:
            await close_pool()
