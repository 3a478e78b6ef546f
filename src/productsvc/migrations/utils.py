"""
Migration utilities.

Migration files are package resources: ``<owner>/sql/*.sql``, where ``owner``
is the migrations-ownership tag carried by the database handle.
"""

from dataclasses import dataclass
from importlib import resources
from importlib.resources.abc import Traversable

from sqlglot.dialects.dialect import Dialect
from sqlglot.tokens import TokenType

from productsvc.connections.database import ProductsDatabase
from productsvc.exceptions import MigrationError
from productsvc.utils.logging import get_logger

logger = get_logger("productsvc.migrations")

HISTORY_TABLE = "schema_migrations"


@dataclass
class MigrationResult:
    """Result of migration execution."""

    migration_id: str
    success: bool
    error_message: str | None = None
    sql_preview: str | None = None  # SQL content for dry-run preview


@dataclass(frozen=True)
class Migration:
    migration_id: str
    resource: Traversable

    def read_sql(self) -> str:
        return self.resource.read_text(encoding="utf-8")


def get_migrations(owner: str) -> list[Migration]:
    """
    Get all migrations owned by a package, sorted by file name.

    Raises:
        MigrationError: If the owner package cannot be imported
    """
    try:
        root = resources.files(owner)
    except ModuleNotFoundError as e:
        raise MigrationError(f"Migrations owner '{owner}' is not an importable package", details={"owner": owner}) from e

    sql_dir = root.joinpath("sql")
    if not sql_dir.is_dir():
        return []

    migrations = [
        Migration(migration_id=entry.name.removesuffix(".sql"), resource=entry)
        for entry in sql_dir.iterdir()
        if entry.is_file() and entry.name.endswith(".sql")
    ]
    return sorted(migrations, key=lambda m: m.migration_id)


def split_statements(sql_content: str) -> list[str]:
    """
    Split a migration script into statements.

    Statements are delimited with the DuckDB tokenizer, so a ``;`` inside a
    string literal, quoted identifier or comment does not end a statement.
    Comments preceding a statement are dropped.
    """
    statements = []
    first = last = None
    for token in Dialect.get_or_raise("duckdb").tokenize(sql_content):
        if token.token_type == TokenType.SEMICOLON:
            if first is not None:
                statements.append(sql_content[first.start : token.start].strip())
            first = None
            continue
        if first is None:
            first = token
        last = token
    if first is not None:
        statements.append(sql_content[first.start : last.end + 1].strip())
    return statements


def _escape_sql_string(value: str) -> str:
    return value.replace("'", "''")


def ensure_history_table(database: ProductsDatabase) -> None:
    database.raw_sql(
        f"""
        CREATE TABLE IF NOT EXISTS {HISTORY_TABLE} (
            migration_id VARCHAR NOT NULL,
            owner VARCHAR NOT NULL,
            environment VARCHAR,
            applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            PRIMARY KEY (migration_id, owner)
        )
        """
    )


def get_applied_migrations(database: ProductsDatabase) -> list[str]:
    """Get migration ids already applied for the database's migrations owner."""
    if HISTORY_TABLE not in database.list_tables():
        return []
    history = database.table(HISTORY_TABLE)
    rows = (
        history.filter(history["owner"] == database.migrations_owner)
        .select("migration_id")
        .to_pyarrow()
        .to_pylist()
    )
    return sorted(row["migration_id"] for row in rows)


def record_migration(database: ProductsDatabase, migration_id: str) -> None:
    """Record a successfully applied migration in the history table."""
    environment = database.environment
    environment_sql = f"'{_escape_sql_string(environment)}'" if environment else "NULL"
    database.raw_sql(
        f"""
        INSERT INTO {HISTORY_TABLE} (migration_id, owner, environment)
        VALUES ('{_escape_sql_string(migration_id)}', '{_escape_sql_string(database.migrations_owner)}', {environment_sql})
        """
    )
