"""In-memory catalog for development and testing."""

from ordering.catalog.port import Catalog, ProductSnapshot


class InMemoryCatalog(Catalog):
    def __init__(self, products: list[ProductSnapshot] | None = None) -> None:
        self._products: dict[str, ProductSnapshot] = {}
        for product in products or []:
            self.add_product(product)

    def add_product(self, product: ProductSnapshot) -> None:
        self._products[str(product.product_id)] = product

    def remove_product(self, product_id: str) -> None:
        self._products.pop(str(product_id), None)

    def get_product(self, product_id: str) -> ProductSnapshot | None:
        return self._products.get(str(product_id))
