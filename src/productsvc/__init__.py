"""
productsvc - products HTTP API with environment-aware connection resolution.
"""

__version__ = "0.1.0"

from productsvc.config import ConfigurationService, EnvironmentResolver, environment_from_args
from productsvc.connections import (
    ConnectionDescriptor,
    ConnectionResolver,
    ProductsDatabase,
    ResolutionMode,
)
from productsvc.exceptions import (
    ConfigurationError,
    ConnectionStringNotFoundError,
    DataIntegrityError,
    EnvironmentArgumentError,
    MigrationError,
    ProductServiceError,
)
from productsvc.products import Product, ProductRepository
from productsvc.utils.logging import get_logger, setup_logging, setup_logging_from_config

__all__ = [
    # Configuration
    "ConfigurationService",
    "EnvironmentResolver",
    "environment_from_args",
    # Connections
    "ConnectionDescriptor",
    "ConnectionResolver",
    "ProductsDatabase",
    "ResolutionMode",
    # Products
    "Product",
    "ProductRepository",
    # Logging
    "setup_logging",
    "setup_logging_from_config",
    "get_logger",
    # Exceptions
    "ProductServiceError",
    "ConfigurationError",
    "ConnectionStringNotFoundError",
    "EnvironmentArgumentError",
    "DataIntegrityError",
    "MigrationError",
]
