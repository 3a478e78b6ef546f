"""
Configuration management.

Environment resolution, layered configuration loading, connection-string lookup.
"""

from productsvc.config.environment import (
    ENVIRONMENT_VARIABLE,
    EnvironmentResolver,
    environment_from_args,
)
from productsvc.config.loader import Config, load_config
from productsvc.config.resolver import resolve_config
from productsvc.config.service import ConfigurationService

__all__ = [
    "Config",
    "ConfigurationService",
    "ENVIRONMENT_VARIABLE",
    "EnvironmentResolver",
    "environment_from_args",
    "load_config",
    "resolve_config",
]
