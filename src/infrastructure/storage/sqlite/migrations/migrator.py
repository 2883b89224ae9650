"""
Versioned schema migrations for the NovaBill database.

Migration files are named v<NNN>_<name>.sql and live next to this module.
Applied versions are recorded with a checksum in schema_migrations; an
existing database file is copied aside before migrating and the copy is
removed once every migration succeeded.

Migrations change table layout only. The JSON collections stored in
kv_entries are never rewritten here.
"""

import hashlib
import re
import shutil
import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

import aiosqlite

from src.config import get_logger, get_settings

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent

_FILENAME = re.compile(r"v(\d+)_(.+)\.sql")

_TRACKING_TABLE = """
CREATE TABLE IF NOT EXISTS schema_migrations (
    version TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    checksum TEXT,
    applied_at TEXT DEFAULT (datetime('now')),
    execution_time_ms INTEGER
)
"""


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

        sql = path.read_text(encoding="utf-8")
        return cls(
            version=match.group(1),
            name=match.group(2),
            path=path,
            checksum=hashlib.sha256(sql.encode()).hexdigest()[:16],
        )


@dataclass
class MigrationResult:
    version: str
    name: str
    success: bool
    execution_time_ms: int
    error: str | None = None


def discover_migrations(directory: Path = MIGRATIONS_DIR) -> list[MigrationInfo]:
    """Migration files in version order; misnamed files are skipped."""
    found = []
    for path in sorted(directory.glob("v*.sql")):
        try:
            found.append(MigrationInfo.from_file(path))
        except ValueError as e:
            logger.warning("skipping_invalid_migration", path=str(path), error=str(e))
    return found


async def _applied_checksums(conn: aiosqlite.Connection) -> dict[str, str]:
    try:
        cursor = await conn.execute("SELECT version, checksum FROM schema_migrations")
    except aiosqlite.OperationalError:
        # fresh database
        return {}
    return {row[0]: row[1] for row in await cursor.fetchall()}


async def pending_migrations(
    db_path: Path | None = None,
    migrations_dir: Path = MIGRATIONS_DIR,
) -> list[MigrationInfo]:
    """Migrations not yet recorded in the database. Never creates the file."""
    db_path = db_path or get_settings().storage.db_path
    migrations = discover_migrations(migrations_dir)
    if not db_path.exists():
        return migrations

    async with aiosqlite.connect(db_path) as conn:
        applied = await _applied_checksums(conn)
    return [m for m in migrations if m.version not in applied]


async def _apply(conn: aiosqlite.Connection, migration: MigrationInfo) -> MigrationResult:
    logger.info("applying_migration", version=migration.version, name=migration.name)
    start = time.perf_counter()

    def elapsed_ms() -> int:
        return int((time.perf_counter() - start) * 1000)

    try:
        await conn.executescript(migration.path.read_text(encoding="utf-8"))
        await conn.execute(
            "INSERT OR REPLACE INTO schema_migrations "
            "(version, name, checksum, execution_time_ms) VALUES (?, ?, ?, ?)",
            (migration.version, migration.name, migration.checksum, elapsed_ms()),
        )
        await conn.commit()
    except aiosqlite.Error as e:
        await conn.rollback()
        logger.error(
            "migration_failed",
            version=migration.version,
            name=migration.name,
            error=str(e),
        )
        return MigrationResult(
            migration.version, migration.name, False, elapsed_ms(), error=str(e)
        )

    result = MigrationResult(migration.version, migration.name, True, elapsed_ms())
    logger.info(
        "migration_applied",
        version=migration.version,
        name=migration.name,
        execution_time_ms=result.execution_time_ms,
    )
    return result


def create_backup(db_path: Path) -> Path:
    """Copy the database file to <stem>.backup_<timestamp>.db."""
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    backup_path = db_path.with_suffix(f".backup_{stamp}.db")
    shutil.copy2(db_path, backup_path)
    logger.info("database_backup_created", backup_path=str(backup_path))
    return backup_path


def restore_backup(db_path: Path, backup_path: Path) -> None:
    shutil.copy2(backup_path, db_path)
    logger.info("database_restored_from_backup", backup_path=str(backup_path))


async def initialize_database(
    db_path: Path | None = None,
    create_backup_before: bool = True,
    migrations_dir: Path = MIGRATIONS_DIR,
) -> list[MigrationResult]:
    """
    Apply every pending migration in order, stopping at the first failure.

    Args:
        db_path: Database file (default from settings)
        create_backup_before: Copy an existing database aside first
        migrations_dir: Directory holding the v*.sql files

    Returns:
        One result per migration attempted; empty when up to date
    """
    db_path = db_path or get_settings().storage.db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)
    logger.info("initializing_database", db_path=str(db_path))

    migrations = discover_migrations(migrations_dir)
    if not migrations:
        logger.warning("no_migrations_found", directory=str(migrations_dir))
        return []

    backup_path = (
        create_backup(db_path) if create_backup_before and db_path.exists() else None
    )
    results: list[MigrationResult] = []

    try:
        async with aiosqlite.connect(db_path) as conn:
            await conn.execute("PRAGMA journal_mode=WAL")
            await conn.execute(_TRACKING_TABLE)
            await conn.commit()

            applied = await _applied_checksums(conn)
            for migration in migrations:
                if migration.version in applied:
                    if applied[migration.version] != migration.checksum:
                        logger.warning(
                            "migration_checksum_changed", version=migration.version
                        )
                    continue

                result = await _apply(conn, migration)
                results.append(result)
                if not result.success:
                    break
    except Exception as e:
        logger.error("database_initialization_failed", error=str(e))
        if backup_path is not None and backup_path.exists():
            restore_backup(db_path, backup_path)
        raise

    if backup_path is not None and all(r.success for r in results):
        backup_path.unlink()
        logger.info("backup_cleaned_up")

    return results


run_migrations = initialize_database
