"""
Migration system for schema changes.

This package owns the products schema history (``sql/``); it is the default
migrations-ownership tag.
"""

from productsvc.migrations.runner import list_pending_migrations, run_migrations
from productsvc.migrations.utils import MigrationResult, get_migrations

__all__ = [
    "run_migrations",
    "list_pending_migrations",
    "get_migrations",
    "MigrationResult",
]
