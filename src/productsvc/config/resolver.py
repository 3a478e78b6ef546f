"""
Configuration resolution.

Applies environment-variable overrides and substitutes ``${VAR_NAME}`` and
``{env}`` placeholders in loaded configuration.
"""

import re
from collections.abc import Mapping
from typing import Any

# Hierarchy separator in variable names: CONNECTION_STRINGS__PRODUCTS
KEY_SEPARATOR = "__"

_VAR_PATTERN = re.compile(r"\${([^}]+)}")


def environment_overrides(environ: Mapping[str, str]) -> dict[str, Any]:
    """
    Build a nested override mapping from environment variables.

    Only names containing the ``__`` separator are mapped; each segment is
    lower-cased, so ``CONNECTION_STRINGS__PRODUCTS`` becomes
    ``{"connection_strings": {"products": ...}}``.

    Args:
        environ: Environment variable mapping

    Returns:
        Nested dictionary of overrides
    """
    overrides: dict[str, Any] = {}
    for name in sorted(environ):
        if KEY_SEPARATOR not in name:
            continue
        segments = [s.lower() for s in name.split(KEY_SEPARATOR)]
        if any(not s for s in segments):
            continue
        node = overrides
        for segment in segments[:-1]:
            child = node.get(segment)
            if not isinstance(child, dict):
                child = {}
                node[segment] = child
            node = child
        node[segments[-1]] = environ[name]
    return overrides


def resolve_config(config_data: dict[str, Any], env: str, environ: Mapping[str, str]) -> dict[str, Any]:
    """
    Resolve configuration placeholders.

    Substitutes ``${VAR_NAME}`` from ``environ`` (unknown names are left as-is)
    and replaces ``{env}`` with the environment name.

    Args:
        config_data: Configuration dictionary
        env: Current environment name
        environ: Environment variable mapping

    Returns:
        Resolved configuration
    """
    return _resolve_value(config_data, env, environ)


def _resolve_value(value: Any, env: str, environ: Mapping[str, str]) -> Any:
    """Recursively resolve values in configuration."""
    if isinstance(value, dict):
        return {k: _resolve_value(v, env, environ) for k, v in value.items()}
    elif isinstance(value, list):
        return [_resolve_value(item, env, environ) for item in value]
    elif isinstance(value, str):
        result = _VAR_PATTERN.sub(lambda m: environ.get(m.group(1), m.group(0)), value)
        return result.replace("{env}", env)
    else:
        return value
