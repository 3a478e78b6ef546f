"""
Connection resolution and database handles.
"""

from productsvc.connections.database import ProductsDatabase
from productsvc.connections.resolver import (
    ConnectionDescriptor,
    ConnectionResolver,
    ResolutionMode,
)

__all__ = [
    "ConnectionDescriptor",
    "ConnectionResolver",
    "ProductsDatabase",
    "ResolutionMode",
]
