"""
Product entity.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

PRICE_QUANTUM = Decimal("0.01")


@dataclass(frozen=True)
class Product:
    """A product row: store-assigned id, optional name, unit price with two decimals."""

    id: int
    product_name: str | None
    unit_price: Decimal

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Product":
        price = row["unit_price"]
        if not isinstance(price, Decimal):
            price = Decimal(str(price))
        return cls(
            id=int(row["id"]),
            product_name=row.get("product_name"),
            unit_price=price.quantize(PRICE_QUANTUM),
        )

    def to_dict(self) -> dict[str, Any]:
        """JSON representation used by the HTTP API."""
        return {
            "id": self.id,
            "productName": self.product_name,
            "unitPrice": float(self.unit_price),
        }
