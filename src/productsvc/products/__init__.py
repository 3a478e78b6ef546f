"""
Product entity and repository.
"""

from productsvc.products.models import Product
from productsvc.products.repository import ProductRepository

__all__ = ["Product", "ProductRepository"]
