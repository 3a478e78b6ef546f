"""
productsvc HTTP service.

Wires the application explicitly: ConfigurationService -> ConnectionResolver ->
connection descriptor, resolved once at startup. Each request then gets its own
database handle and repository.
"""

from __future__ import annotations

import asyncio
import os
from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from aiohttp import web

from productsvc.config.environment import EnvironmentResolver
from productsvc.config.loader import Config
from productsvc.config.service import ConfigurationService
from productsvc.connections.database import ProductsDatabase
from productsvc.connections.resolver import (
    DEFAULT_CONTEXT,
    ConnectionDescriptor,
    ConnectionResolver,
    ResolutionMode,
)
from productsvc.products.repository import ProductRepository
from productsvc.service.api import setup_routes
from productsvc.service.api.middleware import error_middleware
from productsvc.utils.logging import get_logger, setup_logging_from_config

logger = get_logger("productsvc.service")

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8080


class ProductService:
    def __init__(
        self,
        app_dir: Path | str,
        *,
        environment: str | None = None,
        environ: Mapping[str, str] | None = None,
        context_name: str = DEFAULT_CONTEXT,
        configuration: ConfigurationService | None = None,
    ):
        self.app_dir = Path(app_dir)
        self.environ = dict(os.environ) if environ is None else environ
        self.configuration = configuration or ConfigurationService(self.environ)
        # Captured once; everything downstream receives this value
        self.environment = environment or EnvironmentResolver(self.environ).resolve()
        self.context_name = context_name

        self.config: Config | None = None
        self.descriptor: ConnectionDescriptor | None = None

    def load_configuration(self) -> Config:
        """Build the configuration once; later calls return the same root."""
        if self.config is None:
            self.config = self.configuration.build(self.app_dir, self.environment)
        return self.config

    def initialize(self) -> None:
        """
        Resolve the connection descriptor from the loaded configuration.

        Raises:
            ConfigurationError: Missing/invalid configuration or missing
                connection string; raised before any request is served
        """
        config = self.load_configuration()
        resolver = ConnectionResolver(
            self.configuration,
            mode=ResolutionMode.RUNTIME,
            environment=self.environment,
            app_dir=self.app_dir,
            environ=self.environ,
        )
        self.descriptor = resolver.resolve(self.context_name, config=config)
        logger.info(f"Initialized for environment '{self.environment}'")

    @asynccontextmanager
    async def scoped_repository(self) -> AsyncIterator[ProductRepository]:
        """Yield a repository over a fresh database handle, closed afterwards."""
        if self.descriptor is None:
            raise RuntimeError("ProductService not initialized. Call initialize() first.")
        database = ProductsDatabase(self.descriptor)
        try:
            yield ProductRepository(database)
        finally:
            await asyncio.to_thread(database.close)


def create_app(service: ProductService) -> web.Application:
    """Create the aiohttp application for an initialized service."""
    app = web.Application(middlewares=[error_middleware])
    setup_routes(app, service)
    return app


def run_service(
    *,
    app_dir: Path,
    environment: str | None = None,
    host: str | None = None,
    port: int | None = None,
    verbose: bool = False,
) -> None:
    """
    Run the productsvc service (blocking).

    Args:
        app_dir: Directory holding config.yaml
        environment: Environment name (default: PRODUCTSVC_ENVIRONMENT or Production)
        host: Host to bind to (default: service.host from config, then 127.0.0.1)
        port: Port to bind to (default: service.port from config, then 8080)
        verbose: Enable debug logging
    """
    svc = ProductService(app_dir, environment=environment)

    # Logging must be configured before the descriptor is resolved
    config: dict[str, Any] = svc.load_configuration().data
    if verbose:
        config = {**config, "logging": {**(config.get("logging") or {}), "level": "DEBUG"}}
    setup_logging_from_config(config, base_dir=svc.app_dir)

    svc.initialize()

    host = host or svc.config.get("service.host", DEFAULT_HOST)
    port = port or int(svc.config.get("service.port", DEFAULT_PORT))

    app = create_app(svc)

    async def on_startup(app: web.Application) -> None:
        logger.info(f"productsvc started on http://{host}:{port}")

    app.on_startup.append(on_startup)

    # Request logging comes from the error middleware
    web.run_app(app, host=host, port=port, access_log=None)
