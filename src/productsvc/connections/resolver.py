"""
Connection resolution.

Decides, for a logical database name, the connection string and the
migrations-ownership tag the database handle is built with. One resolver runs in
exactly one ``ResolutionMode``:

- ``runtime``: the serving application. Configuration comes from the
  application directory and the passed-down environment; a missing connection
  string is fatal.
- ``design-runtime-wiring``: runtime wiring reused by tooling, with the base
  directory pointed at the application directory.
- ``design-environment``: configuration rebuilt independently, environment
  re-read from ``PRODUCTSVC_ENVIRONMENT``.
- ``design-argument``: like ``design-environment`` but the environment comes
  from ``--environment <name>`` on the command line.
- ``developer-fallback``: a hardcoded local string, no configuration at all.
  Must be enabled explicitly.
"""

from __future__ import annotations

import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

from productsvc.config.environment import EnvironmentResolver, environment_from_args
from productsvc.config.loader import Config
from productsvc.config.service import ConfigurationService
from productsvc.exceptions import ConfigurationError, ConnectionStringNotFoundError
from productsvc.utils.logging import get_logger

logger = get_logger("productsvc.connections.resolver")

DEFAULT_CONTEXT = "products"
MIGRATIONS_OWNER = "productsvc.migrations"
DEVELOPER_CONNECTION_STRING = "duckdb://data/products_dev.duckdb"

# Application directory as seen from a sibling tooling directory
SIBLING_APP_DIR = Path("..") / "app"


class ResolutionMode(StrEnum):
    RUNTIME = "runtime"
    DESIGN_RUNTIME_WIRING = "design-runtime-wiring"
    DESIGN_ENVIRONMENT = "design-environment"
    DESIGN_ARGUMENT = "design-argument"
    DEVELOPER_FALLBACK = "developer-fallback"


@dataclass(frozen=True)
class ConnectionDescriptor:
    """Connection string and migrations owner resolved for one logical database."""

    context_name: str
    connection_string: str
    migrations_owner: str
    environment: str | None
    mode: ResolutionMode


class ConnectionResolver:
    """
    Resolves connection descriptors for one mode.

    Args:
        configuration: Service used by runtime and design-runtime-wiring modes
        mode: Resolution mode
        environment: Environment name captured at process start (runtime and
            design-runtime-wiring); resolved from ``environ`` when omitted
        app_dir: Application directory for runtime mode (default: cwd)
        design_app_dir: Application directory for design modes
            (default: ``<cwd>/../app``)
        args: Command-line tokens for design-argument mode
        environ: Environment variable mapping (default: os.environ snapshot)
        migrations_owner: Package whose ``sql/`` resources hold the migrations
        allow_developer_fallback: Opt-in for developer-fallback mode
    """

    def __init__(
        self,
        configuration: ConfigurationService,
        *,
        mode: ResolutionMode = ResolutionMode.RUNTIME,
        environment: str | None = None,
        app_dir: Path | str | None = None,
        design_app_dir: Path | str | None = None,
        args: Sequence[str] = (),
        environ: Mapping[str, str] | None = None,
        migrations_owner: str = MIGRATIONS_OWNER,
        allow_developer_fallback: bool = False,
    ):
        self.configuration = configuration
        self.mode = ResolutionMode(mode)
        self.environ = dict(os.environ) if environ is None else environ
        self.environment = environment or EnvironmentResolver(self.environ).resolve()
        self.app_dir = Path.cwd() if app_dir is None else Path(app_dir)
        self.design_app_dir = Path.cwd() / SIBLING_APP_DIR if design_app_dir is None else Path(design_app_dir)
        self.args = tuple(args)
        self.migrations_owner = migrations_owner
        self.allow_developer_fallback = allow_developer_fallback

    def resolve(self, context_name: str = DEFAULT_CONTEXT, *, config: Config | None = None) -> ConnectionDescriptor:
        """
        Resolve the descriptor for ``context_name``.

        Args:
            context_name: Logical connection name
            config: Configuration already built by the injected service for this
                resolver's base directory and environment; runtime and
                design-runtime-wiring modes use it instead of building again

        Raises:
            ConnectionStringNotFoundError: Configured modes, key absent
            EnvironmentArgumentError: design-argument mode, flag missing or empty
            ConfigurationError: Base config missing/invalid, or developer
                fallback used without opt-in
            ValueError: ``config`` passed to a mode that rebuilds configuration
        """
        if config is not None and self.mode not in (ResolutionMode.RUNTIME, ResolutionMode.DESIGN_RUNTIME_WIRING):
            raise ValueError(f"Mode '{self.mode.value}' builds its own configuration")

        if self.mode is ResolutionMode.DEVELOPER_FALLBACK:
            return self._developer_fallback(context_name)

        if self.mode is ResolutionMode.RUNTIME:
            service, base_dir, environment = self.configuration, self.app_dir, self.environment
        elif self.mode is ResolutionMode.DESIGN_RUNTIME_WIRING:
            service, base_dir, environment = self.configuration, self.design_app_dir, self.environment
        elif self.mode is ResolutionMode.DESIGN_ENVIRONMENT:
            service = ConfigurationService(self.environ)
            base_dir = self.design_app_dir
            environment = EnvironmentResolver(self.environ).resolve()
        else:
            service = ConfigurationService(self.environ)
            base_dir = self.design_app_dir
            environment = environment_from_args(self.args)

        if config is None:
            config = service.build(base_dir, environment)
        connection_string = service.get_connection_string(config, context_name)
        if connection_string is None:
            raise ConnectionStringNotFoundError(context_name, base_dir=str(base_dir), environment=environment)

        logger.info(
            f"Resolved connection '{context_name}' (mode={self.mode.value}, "
            f"environment={environment}, base_dir={base_dir})"
        )
        return self._descriptor(context_name, connection_string, environment)

    def _developer_fallback(self, context_name: str) -> ConnectionDescriptor:
        if not self.allow_developer_fallback:
            raise ConfigurationError(
                "Developer fallback connection is disabled\n"
                "  Suggestion: Pass allow_developer_fallback=True (--allow-developer-fallback) "
                "or use a configured mode",
                details={"context": context_name, "mode": self.mode.value},
            )
        logger.warning(
            f"Using hardcoded developer connection for '{context_name}'; configuration files are ignored"
        )
        return self._descriptor(context_name, DEVELOPER_CONNECTION_STRING, None)

    def _descriptor(self, context_name: str, connection_string: str, environment: str | None) -> ConnectionDescriptor:
        return ConnectionDescriptor(
            context_name=context_name,
            connection_string=connection_string,
            migrations_owner=self.migrations_owner,
            environment=environment,
            mode=self.mode,
        )
