"""
Configuration file loading.

Loads ``config.yaml`` and ``config.{env}.yaml`` from a base directory and layers
environment-variable overrides on top.
"""

import os
from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Any

import yaml

from productsvc.config.resolver import environment_overrides, resolve_config
from productsvc.exceptions import ConfigurationError
from productsvc.utils.logging import get_logger

logger = get_logger("productsvc.config")

BASE_CONFIG_FILE = "config.yaml"


class Config:
    """Configuration container with dict-like access."""

    def __init__(self, data: dict[str, Any], environment: str | None = None):
        self.data = data
        self.environment = environment

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value using dot notation."""
        keys = key.split(".")
        value = self.data
        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
                if value is None:
                    return default
            else:
                return default
        return value

    def __getitem__(self, key: str) -> Any:
        """Dict-like access: config['key'] or config['nested.key']."""
        if "." in key:
            if key not in self:
                raise KeyError(f"Config key '{key}' not found")
            return self.get(key)
        if key in self.data:
            value = self.data[key]
            # Return nested dicts as Config objects for chaining
            if isinstance(value, dict):
                return Config(value, self.environment)
            return value
        raise KeyError(f"Config key '{key}' not found")

    def __contains__(self, key: str) -> bool:
        """Check if key exists in config."""
        value = self.data
        for k in key.split("."):
            if not isinstance(value, dict) or k not in value:
                return False
            value = value[k]
        return True

    def __iter__(self) -> Iterator[str]:
        """Iterate over top-level keys."""
        return iter(self.data)

    def keys(self):
        return self.data.keys()

    def items(self):
        return self.data.items()


def config_file_for(base_dir: Path, environment: str | None = None) -> Path:
    """Return the path of the base or environment-specific config file."""
    if environment is None:
        return base_dir / BASE_CONFIG_FILE
    return base_dir / f"config.{environment}.yaml"


def load_config(
    base_dir: Path | str | None = None,
    env: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> Config:
    """
    Load layered configuration.

    Layers, later overriding earlier: ``config.yaml`` (required),
    ``config.{env}.yaml`` (optional), environment variables.

    Args:
        base_dir: Directory holding the config files (default: current directory)
        env: Environment name
        environ: Environment variable mapping (default: os.environ)

    Returns:
        Config instance with merged configuration

    Raises:
        ConfigurationError: If the base file is missing or any file cannot be parsed
    """
    base_dir = Path.cwd() if base_dir is None else Path(base_dir)
    if environ is None:
        environ = dict(os.environ)

    base_config_path = config_file_for(base_dir)
    if not base_config_path.is_file():
        raise ConfigurationError(
            f"Configuration file not found: {base_config_path}\n"
            f"  Suggestion: Create a {BASE_CONFIG_FILE} file in the application directory",
            details={"path": str(base_config_path)},
        )

    config_data = _read_yaml(base_config_path)

    if env:
        env_config_path = config_file_for(base_dir, env)
        if env_config_path.is_file():
            _merge_dict(config_data, _read_yaml(env_config_path))
        else:
            logger.debug(f"No environment config at {env_config_path}, skipping")

    _merge_overrides(config_data, environment_overrides(environ))

    return Config(resolve_config(config_data, env or "", environ), environment=env)


def _read_yaml(path: Path) -> dict[str, Any]:
    """Read one YAML config file; an empty file is an empty mapping."""
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        location = f" at line {mark.line + 1}, column {mark.column + 1}" if mark else ""
        raise ConfigurationError(
            f"Error parsing {path.name}{location}:\n"
            f"  {e}\n"
            f"  File: {path}\n"
            f"  Suggestion: Check YAML syntax, ensure proper indentation and quotes",
            details={"path": str(path)},
        ) from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read {path}: {e}", details={"path": str(path)}) from e

    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Configuration must be a mapping, got {type(data).__name__}\n  File: {path}",
            details={"path": str(path)},
        )
    return data


def _merge_dict(base: dict, override: dict):
    """Recursively merge override into base."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _merge_dict(base[key], value)
        else:
            base[key] = value


def _merge_overrides(base: dict, overrides: dict):
    """
    Merge environment-variable overrides into base.

    Override keys are lower-case; they replace an existing key that differs only
    in case, so ``CONNECTION_STRINGS__PRODUCTSDBCONTEXT`` overrides
    ``connection_strings.ProductsDbContext``.
    """
    for key, value in overrides.items():
        target = next((k for k in base if isinstance(k, str) and k.lower() == key), key)
        if isinstance(value, dict) and isinstance(base.get(target), dict):
            _merge_overrides(base[target], value)
        else:
            base[target] = value
