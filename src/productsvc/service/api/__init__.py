"""
REST API module for productsvc.
"""

from productsvc.service.api.routes import setup_routes

__all__ = ["setup_routes"]
