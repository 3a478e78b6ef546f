"""
Product endpoints.
"""

from aiohttp import web

from productsvc.service.api.errors import NotFoundError, ValidationError
from productsvc.service.api.handlers import BaseHandler


class ProductsHandler(BaseHandler):
    """Handler for product lookups."""

    async def get(self, request: web.Request) -> web.Response:
        """
        GET /api/products/{id}

        Returns the product, 404 when no product has the id, 400 when the id is
        not an integer.
        """
        raw_id = request.match_info["id"]
        try:
            product_id = int(raw_id)
        except ValueError:
            raise ValidationError(f"Product id must be an integer, got '{raw_id}'", details={"id": raw_id}) from None

        async with self.service.scoped_repository() as repository:
            product = await repository.get_by_id(product_id)

        if product is None:
            raise NotFoundError("Product", raw_id)
        return await self.json_response(product.to_dict(), request=request)
