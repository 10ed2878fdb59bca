"""
Versioned schema migrations for the ledger database.

Files named ``vNNN_name.sql`` in this directory are applied in version
order. Each applied version is recorded with a content checksum in
``schema_migrations``; a recorded migration whose file has since changed
stops the run. The database file is copied aside before migrating and
restored if anything raises.
"""

import asyncio
import hashlib
import re
import shutil
import sys
import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

import aiosqlite

from ricestock.config import get_logger, get_settings
from ricestock.core.exceptions import MigrationError

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent

_FILENAME = re.compile(r"v(\d+)_(.+)\.sql")

REQUIRED_TABLES = [
    "warehouses",
    "rice_varieties",
    "suppliers",
    "stock_balances",
    "purchases",
    "sales",
    "stock_transfers",
    "stock_adjustments",
    "ledger_entries",
    "schema_migrations",
]

# Guards for the append-only ledger and undeletable lots.
REQUIRED_TRIGGERS = [
    "trg_stock_balances_no_delete",
    "trg_ledger_entries_no_update",
    "trg_ledger_entries_no_delete",
]


@dataclass
class MigrationInfo:
    """A migration file on disk."""

    version: str
    name: str
    path: Path
    checksum: str

    @classmethod
    def from_file(cls, path: Path) -> "MigrationInfo":
        match = _FILENAME.fullmatch(path.name)
        if not match:
            raise ValueError(f"Invalid migration filename: {path.name}")
        digest = hashlib.sha256(path.read_bytes()).hexdigest()
        return cls(version=match.group(1), name=match.group(2), path=path, checksum=digest[:16])


@dataclass
class MigrationResult:
    """Outcome of applying one migration."""

    version: str
    name: str
    success: bool
    execution_time_ms: int
    error: str | None = None


def _check(name: str, passed: bool, **detail: Any) -> dict[str, Any]:
    return {"check": name, "status": "PASS" if passed else "FAIL", **detail}


async def _names(conn: aiosqlite.Connection, kind: str) -> set[str]:
    cursor = await conn.execute("SELECT name FROM sqlite_master WHERE type = ?", (kind,))
    return {row[0] for row in await cursor.fetchall()}


async def get_applied_migrations(conn: aiosqlite.Connection) -> dict[str, str]:
    """Map of applied version to checksum; empty before the first migration."""
    try:
        cursor = await conn.execute("SELECT version, checksum FROM schema_migrations ORDER BY version")
    except aiosqlite.OperationalError:
        return {}
    return {version: checksum for version, checksum in await cursor.fetchall()}


async def get_current_version(conn: aiosqlite.Connection) -> str | None:
    applied = await get_applied_migrations(conn)
    return max(applied) if applied else None


def discover_migrations() -> list[MigrationInfo]:
    """Migration files in this package, ordered by version."""
    found = []
    for path in MIGRATIONS_DIR.glob("v*.sql"):
        try:
            found.append(MigrationInfo.from_file(path))
        except ValueError as e:
            logger.warning("skipping_invalid_migration", path=str(path), error=str(e))
    return sorted(found, key=lambda m: int(m.version))


def _pending(migrations: list[MigrationInfo], applied: dict[str, str]) -> list[MigrationInfo]:
    """
    Migrations still to run.

    Stops at the first applied migration whose file content has changed:
    nothing after it is returned.
    """
    pending = []
    for migration in migrations:
        recorded = applied.get(migration.version)
        if recorded is None:
            pending.append(migration)
        elif recorded != migration.checksum:
            logger.error(
                "migration_checksum_changed",
                version=migration.version,
                recorded=recorded,
                current=migration.checksum,
            )
            break
    return pending


async def apply_migration(conn: aiosqlite.Connection, migration: MigrationInfo) -> MigrationResult:
    """Run one migration script and record it, or roll both back."""
    logger.info("applying_migration", version=migration.version, name=migration.name)
    started = time.perf_counter()

    def elapsed_ms() -> int:
        return int((time.perf_counter() - started) * 1000)

    try:
        # executescript commits first; the script and its row share one transaction
        await conn.executescript("BEGIN;\n" + migration.path.read_text(encoding="utf-8"))
        await conn.execute(
            "INSERT INTO schema_migrations (version, name, checksum, execution_time_ms) VALUES (?, ?, ?, ?)",
            (migration.version, migration.name, migration.checksum, elapsed_ms()),
        )
        cursor = await conn.execute("PRAGMA foreign_key_check")
        violations = await cursor.fetchall()
        if violations:
            error = f"{len(violations)} foreign key violation(s)"
        else:
            await conn.commit()
            error = None
    except aiosqlite.Error as e:
        error = str(e)

    if error is not None:
        await conn.rollback()
        logger.error("migration_failed", version=migration.version, error=error)
        return MigrationResult(migration.version, migration.name, False, elapsed_ms(), error)

    logger.info("migration_applied", version=migration.version, execution_time_ms=elapsed_ms())
    return MigrationResult(migration.version, migration.name, True, elapsed_ms())


async def _missing_triggers(conn: aiosqlite.Connection) -> list[str]:
    existing = await _names(conn, "trigger")
    return [t for t in REQUIRED_TRIGGERS if t not in existing]


def create_backup(db_path: Path) -> Path:
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    backup_path = db_path.with_suffix(f".backup_{stamp}.db")
    shutil.copy2(db_path, backup_path)
    logger.info("database_backup_created", backup_path=str(backup_path))
    return backup_path


def restore_backup(db_path: Path, backup_path: Path) -> None:
    shutil.copy2(backup_path, db_path)
    logger.warning("database_restored_from_backup", backup_path=str(backup_path))


async def initialize_database(
    db_path: Path | None = None,
    create_backup_before: bool = True,
) -> list[MigrationResult]:
    """
    Bring the database at ``db_path`` up to the latest schema.

    Args:
        db_path: Database file; defaults to ``STORAGE_DATA_DIR/STORAGE_DB_NAME``.
        create_backup_before: Copy an existing file aside first. The copy is
            removed when every migration succeeds.

    Returns:
        One result per migration applied. Empty when already current.

    Raises:
        MigrationError: a migration failed. Its changes are rolled back and
            the backup, if taken, is copied back over the database.
    """
    db_path = db_path or get_settings().storage.db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)
    logger.info("initializing_database", db_path=str(db_path))

    backup_path = create_backup(db_path) if create_backup_before and db_path.exists() else None
    results: list[MigrationResult] = []

    try:
        async with aiosqlite.connect(db_path) as conn:
            await conn.execute("PRAGMA journal_mode=WAL")
            await conn.execute("PRAGMA foreign_keys=ON")

            pending = _pending(discover_migrations(), await get_applied_migrations(conn))
            for migration in pending:
                result = await apply_migration(conn, migration)
                results.append(result)
                if not result.success:
                    raise MigrationError(migration.version, result.error or "unknown error")

            if results:
                missing = await _missing_triggers(conn)
                if missing:
                    logger.error("ledger_triggers_missing", missing=missing)

        if backup_path:
            backup_path.unlink()
            logger.info("backup_cleaned_up")

    except Exception as e:
        logger.error("database_initialization_failed", error=str(e))
        if backup_path and backup_path.exists():
            restore_backup(db_path, backup_path)
        raise

    logger.info("database_ready", applied=len(results))
    return results


run_migrations = initialize_database


async def get_migration_status(db_path: Path | None = None) -> dict:
    """Applied and pending versions for ``db_path``."""
    db_path = db_path or get_settings().storage.db_path
    if not db_path.exists():
        return {"exists": False, "current_version": None, "applied_migrations": [], "pending_migrations": []}

    discovered = discover_migrations()
    async with aiosqlite.connect(db_path) as conn:
        applied = await get_applied_migrations(conn)

    return {
        "exists": True,
        "current_version": max(applied) if applied else None,
        "applied_migrations": sorted(applied),
        "pending_migrations": [m.version for m in discovered if m.version not in applied],
        "total_migrations": len(discovered),
    }


async def verify_schema_integrity(db_path: Path | None = None) -> list[dict]:
    """Foreign keys, SQLite integrity, required tables and ledger triggers."""
    db_path = db_path or get_settings().storage.db_path

    async with aiosqlite.connect(db_path) as conn:
        cursor = await conn.execute("PRAGMA foreign_key_check")
        fk_violations = len(await cursor.fetchall())

        cursor = await conn.execute("PRAGMA integrity_check")
        (integrity,) = await cursor.fetchone()

        tables = await _names(conn, "table")
        missing_triggers = await _missing_triggers(conn)

    missing_tables = [t for t in REQUIRED_TABLES if t not in tables]
    return [
        _check("foreign_keys", fk_violations == 0, violations=fk_violations),
        _check("integrity", integrity == "ok", result=integrity),
        _check("required_tables", not missing_tables, missing=missing_tables),
        _check("ledger_triggers", not missing_triggers, missing=missing_triggers),
    ]


async def _run_cli(args) -> int:
    if args.status:
        status = await get_migration_status(args.db_path)
        if not status["exists"]:
            print("database not found")
            return 1
        print(f"current:  v{status['current_version']}")
        print(f"applied:  {', '.join(status['applied_migrations']) or '-'}")
        print(f"pending:  {', '.join(status['pending_migrations']) or '-'}")
        return 0

    if args.verify:
        checks = await verify_schema_integrity(args.db_path)
        for check in checks:
            extra = {k: v for k, v in check.items() if k not in ("check", "status")}
            print(f"{check['status']:4}  {check['check']}  {extra if check['status'] != 'PASS' else ''}")
        return 0 if all(c["status"] == "PASS" for c in checks) else 1

    try:
        results = await initialize_database(args.db_path, create_backup_before=not args.no_backup)
    except MigrationError as e:
        print(f"FAILED: {e.message}")
        return 1

    if not results:
        print("schema is up to date")
    for result in results:
        print(f"v{result.version} {result.name} ({result.execution_time_ms}ms) ok")
    return 0


def main() -> None:
    """``ricestock-migrate`` entry point."""
    import argparse

    parser = argparse.ArgumentParser(description="Apply or inspect ledger schema migrations")
    parser.add_argument("--db-path", type=Path, help="database file (default from settings)")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--status", action="store_true", help="show applied and pending versions")
    mode.add_argument("--verify", action="store_true", help="check schema integrity and ledger triggers")
    parser.add_argument("--no-backup", action="store_true", help="do not copy the database aside first")

    sys.exit(asyncio.run(_run_cli(parser.parse_args())))


if __name__ == "__main__":
    main()
