"""
API route registration.
"""

from typing import TYPE_CHECKING

from aiohttp import web

from productsvc.service.api.handlers.health import HealthHandler
from productsvc.service.api.handlers.products import ProductsHandler

if TYPE_CHECKING:
    from productsvc.service.server import ProductService


def setup_routes(app: web.Application, service: "ProductService") -> None:
    """
    Register all API routes.

    Args:
        app: aiohttp Application
        service: ProductService instance for handler access
    """
    health = HealthHandler(service)
    products = ProductsHandler(service)

    app.router.add_routes(
        [
            web.get("/health", health.health),
            web.get("/api/products/{id}", products.get),
        ]
    )
