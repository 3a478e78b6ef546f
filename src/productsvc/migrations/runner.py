"""
Migration runner.

Applies the SQL migrations owned by the database's migrations owner.
"""

from productsvc.connections.database import ProductsDatabase
from productsvc.migrations.utils import (
    Migration,
    MigrationResult,
    ensure_history_table,
    get_applied_migrations,
    get_migrations,
    record_migration,
    split_statements,
)
from productsvc.utils.logging import get_logger

logger = get_logger("productsvc.migrations")


def list_pending_migrations(database: ProductsDatabase) -> list[str]:
    """List migration ids not yet applied to the database."""
    applied = set(get_applied_migrations(database))
    return [m.migration_id for m in get_migrations(database.migrations_owner) if m.migration_id not in applied]


def run_migrations(
    database: ProductsDatabase,
    *,
    migration_id: str | None = None,
    dry_run: bool = False,
) -> list[MigrationResult]:
    """
    Apply pending migrations in order, stopping at the first failure.

    Args:
        database: Target database; its migrations owner selects the migrations
        migration_id: Run only this migration (if pending)
        dry_run: If True, don't execute, just return what would be run

    Returns:
        List of migration results
    """
    migrations = {m.migration_id: m for m in get_migrations(database.migrations_owner)}
    pending = list_pending_migrations(database)

    if migration_id is not None:
        if migration_id not in migrations:
            logger.error(f"Migration not found: {migration_id}")
            return [MigrationResult(migration_id=migration_id, success=False, error_message="Migration not found")]
        if migration_id not in pending:
            logger.info(f"Migration already applied: {migration_id}")
            return []
        pending = [migration_id]

    if not pending:
        logger.info("No pending migrations")
        return []

    if not dry_run:
        ensure_history_table(database)

    results = []
    for name in pending:
        result = _run_single_migration(database, migrations[name], dry_run)
        results.append(result)
        if not result.success:
            break
    return results


def _run_single_migration(database: ProductsDatabase, migration: Migration, dry_run: bool) -> MigrationResult:
    sql_content = migration.read_sql()

    if dry_run:
        logger.info(f"[DRY RUN] Would execute: {migration.migration_id}")
        return MigrationResult(migration_id=migration.migration_id, success=True, sql_preview=sql_content[:500])

    try:
        logger.info(f"Executing migration: {migration.migration_id}")
        for statement in split_statements(sql_content):
            database.raw_sql(statement)
        record_migration(database, migration.migration_id)
    except Exception as e:
        logger.error(f"Migration failed: {migration.migration_id} - {e}")
        return MigrationResult(migration_id=migration.migration_id, success=False, error_message=str(e))

    logger.info(f"Migration completed: {migration.migration_id}")
    return MigrationResult(migration_id=migration.migration_id, success=True)
