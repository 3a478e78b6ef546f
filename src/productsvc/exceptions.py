"""
productsvc exception hierarchy.

All domain-specific exceptions inherit from ProductServiceError, making it easy
to catch any service error with a single base class while still allowing
fine-grained handling when needed.

Hierarchy::

    ProductServiceError
    ├── ConfigurationError              - config loading, parsing, resolution
    │   ├── ConnectionStringNotFoundError - logical context has no connection string
    │   └── EnvironmentArgumentError    - --environment flag missing or without value
    ├── DataIntegrityError              - store returned data that breaks an invariant
    └── MigrationError                  - migration discovery / history failures
"""

from __future__ import annotations


class ProductServiceError(Exception):
    """Base exception for all productsvc errors."""

    def __init__(self, message: str, *, details: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


# --- Configuration -----------------------------------------------------------


class ConfigurationError(ProductServiceError):
    """Raised when configuration loading, parsing, or resolution fails."""


class ConnectionStringNotFoundError(ConfigurationError):
    """Raised when no connection string is configured for a logical context."""

    def __init__(self, context_name: str, *, base_dir: str | None = None, environment: str | None = None) -> None:
        super().__init__(
            f"No connection string configured for '{context_name}' "
            f"(environment: {environment or 'unknown'}, base directory: {base_dir or 'unknown'})\n"
            f"  Suggestion: Add connection_strings.{context_name} to config.yaml or set "
            f"CONNECTION_STRINGS__{context_name.upper()}",
            details={"context": context_name, "base_dir": base_dir, "environment": environment},
        )
        self.context_name = context_name


class EnvironmentArgumentError(ConfigurationError):
    """Raised when the environment flag is absent or has no value."""

    def __init__(self, flag: str, reason: str) -> None:
        super().__init__(f"Environment argument '{flag}' {reason}", details={"flag": flag})
        self.flag = flag


# --- Data --------------------------------------------------------------------


class DataIntegrityError(ProductServiceError):
    """Raised when the store returns rows that violate a uniqueness expectation."""


# --- Migrations --------------------------------------------------------------


class MigrationError(ProductServiceError):
    """Raised when migrations cannot be discovered or recorded."""
