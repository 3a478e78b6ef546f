"""
API middleware components.
"""

from productsvc.service.api.middleware.error import error_middleware

__all__ = ["error_middleware"]
