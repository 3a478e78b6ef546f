"""
Database handle built from a connection descriptor, via ibis.
"""

from pathlib import Path
from typing import Any

import ibis

from productsvc.connections.resolver import ConnectionDescriptor
from productsvc.utils.logging import get_logger

logger = get_logger("productsvc.connections.database")

DUCKDB_SCHEME = "duckdb://"


class ProductsDatabase:
    """
    Database handle for the products context.

    The ibis backend is opened lazily on first use. ``duckdb://<path>``
    connection strings open DuckDB directly (creating parent directories);
    anything else is handed to ``ibis.connect``.
    """

    def __init__(self, descriptor: ConnectionDescriptor):
        self.descriptor = descriptor
        self._connection: ibis.BaseBackend | None = None

    @property
    def migrations_owner(self) -> str:
        return self.descriptor.migrations_owner

    @property
    def environment(self) -> str | None:
        return self.descriptor.environment

    @property
    def connection(self) -> ibis.BaseBackend:
        """Get ibis backend connection (lazy initialization)."""
        if self._connection is None:
            connection_string = self.descriptor.connection_string
            if connection_string.startswith(DUCKDB_SCHEME):
                path = connection_string[len(DUCKDB_SCHEME) :] or ":memory:"
                if path != ":memory:":
                    Path(path).parent.mkdir(parents=True, exist_ok=True)
                self._connection = ibis.duckdb.connect(path)
            else:
                self._connection = ibis.connect(connection_string)
            logger.debug(f"Opened connection for '{self.descriptor.context_name}'")
        return self._connection

    def table(self, name: str) -> Any:
        """Return an ibis table expression."""
        return self.connection.table(name)

    def list_tables(self) -> list[str]:
        return list(self.connection.list_tables())

    def raw_sql(self, statement: str) -> None:
        """Execute one statement for its side effects (DDL/DML)."""
        self.connection.raw_sql(statement)

    def close(self) -> None:
        """Close connection and cleanup resources."""
        if self._connection is not None:
            try:
                self._connection.disconnect()
            finally:
                self._connection = None

    def __enter__(self) -> "ProductsDatabase":
        return self

    def __exit__(self, exc_type: type[BaseException] | None, exc_val: BaseException | None, exc_tb: Any) -> None:
        try:
            self.close()
        except Exception as e:
            # Don't override the original exception if one occurred
            if exc_type is None:
                raise
            logger.warning(f"Error closing connection {self.descriptor.context_name} during context exit: {e}")

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(context='{self.descriptor.context_name}')"
