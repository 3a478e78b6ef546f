"""
Environment name resolution.

The active environment is read once from ``PRODUCTSVC_ENVIRONMENT`` and passed
down explicitly. Design-time tooling can take it from ``--environment`` instead.
"""

import os
from collections.abc import Mapping, Sequence

from productsvc.exceptions import EnvironmentArgumentError

ENVIRONMENT_VARIABLE = "PRODUCTSVC_ENVIRONMENT"
ENVIRONMENT_FLAG = "--environment"

DEVELOPMENT = "Development"
PRODUCTION = "Production"


class EnvironmentResolver:
    """Determines the deployment environment from process environment state."""

    def __init__(self, environ: Mapping[str, str] | None = None, variable: str = ENVIRONMENT_VARIABLE):
        # Snapshot so later changes to os.environ don't alter the result
        self.environ = dict(os.environ) if environ is None else environ
        self.variable = variable

    def resolve(self) -> str:
        """Return the variable's value, or "Production" when unset or empty."""
        return self.environ.get(self.variable) or PRODUCTION


def environment_from_args(args: Sequence[str], flag: str = ENVIRONMENT_FLAG) -> str:
    """
    Find the environment name passed on the command line.

    The value is the token following ``flag``.

    Args:
        args: Command-line tokens
        flag: Flag name to search for

    Returns:
        Environment name

    Raises:
        EnvironmentArgumentError: If the flag is absent or not followed by a value
    """
    tokens = list(args)
    if flag not in tokens:
        raise EnvironmentArgumentError(flag, "was not supplied")

    position = tokens.index(flag)
    if position + 1 >= len(tokens):
        raise EnvironmentArgumentError(flag, "has no value")

    value = tokens[position + 1]
    if not value or value.startswith("--"):
        raise EnvironmentArgumentError(flag, f"has no value (next token: {value!r})")
    return value
