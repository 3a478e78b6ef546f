"""
Configuration service: builds configuration roots and looks up connection strings.
"""

import os
from collections.abc import Mapping
from pathlib import Path

from productsvc.config.loader import Config, load_config

CONNECTION_STRINGS_SECTION = "connection_strings"


class ConfigurationService:
    """
    Builds layered configuration for a base directory and environment.

    Environment-variable overrides are read from ``environ``, a mapping captured
    at construction (a snapshot of ``os.environ`` by default).
    """

    def __init__(self, environ: Mapping[str, str] | None = None):
        self.environ = dict(os.environ) if environ is None else environ

    def build(self, base_dir: Path | str, environment: str) -> Config:
        """Load ``config.yaml``, ``config.{environment}.yaml`` and overrides from ``base_dir``."""
        return load_config(base_dir, env=environment, environ=self.environ)

    @staticmethod
    def get_connection_string(config: Config, logical_name: str) -> str | None:
        """
        Return the connection string for ``logical_name``, or None when absent.

        An exact key wins; otherwise keys are matched regardless of case, as
        environment-variable overrides are stored lower-case.
        """
        section = config.get(CONNECTION_STRINGS_SECTION)
        if not isinstance(section, dict):
            return None
        if logical_name in section:
            value = section[logical_name]
        else:
            value = next((v for k, v in section.items() if str(k).lower() == logical_name.lower()), None)
        if value is None or value == "":
            return None
        return str(value)
