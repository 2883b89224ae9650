"""Schema migrations for the key-value store."""

from src.infrastructure.storage.sqlite.migrations.migrator import (
    MigrationInfo,
    MigrationResult,
    create_backup,
    discover_migrations,
    initialize_database,
    pending_migrations,
    restore_backup,
    run_migrations,
)

__all__ = [
    "MigrationInfo",
    "MigrationResult",
    "create_backup",
    "discover_migrations",
    "initialize_database",
    "pending_migrations",
    "restore_backup",
    "run_migrations",
]
