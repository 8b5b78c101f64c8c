"""Product catalog port.

The catalog is owned elsewhere; checkout only needs the seller and the
current price of a product, frozen into the order at creation.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class ProductSnapshot:
    product_id: str
    seller_id: str | None
    price: float
    unit: str = "kg"
    name: str | None = None


class Catalog(ABC):
    @abstractmethod
    def get_product(self, product_id: str) -> ProductSnapshot | None:
        """Return the product as currently listed, or None if it no longer exists."""
        ...
