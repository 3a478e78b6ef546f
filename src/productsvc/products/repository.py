"""
Product repository: fetch-by-id queries over a database handle.
"""

import asyncio

from productsvc.connections.database import ProductsDatabase
from productsvc.exceptions import DataIntegrityError
from productsvc.products.models import Product

PRODUCTS_TABLE = "products"


class ProductRepository:
    """Thin query object over one database handle."""

    def __init__(self, database: ProductsDatabase):
        self.database = database

    async def get_by_id(self, product_id: int) -> Product | None:
        """
        Fetch one product by id.

        The query runs in a worker thread so the event loop is not blocked.
        Store errors propagate unchanged.

        Returns:
            The product, or None when no row has this id

        Raises:
            DataIntegrityError: If more than one row matches
        """
        return await asyncio.to_thread(self._fetch, product_id)

    def _fetch(self, product_id: int) -> Product | None:
        products = self.database.table(PRODUCTS_TABLE)
        rows = (
            products.filter(products["id"] == product_id)
            .select("id", "product_name", "unit_price")
            .limit(2)
            .to_pyarrow()
            .to_pylist()
        )
        if not rows:
            return None
        if len(rows) > 1:
            raise DataIntegrityError(
                f"Expected one product with id {product_id}, found several",
                details={"product_id": product_id},
            )
        return Product.from_row(rows[0])
