"""Pricing and seller grouping for checkout.

Pure functions over plain data: the checkout service loads the cart, feeds
its items through ``price_cart_items`` and, once items carry their checkout
tags, ``split_by_seller`` turns them into one order spec per
``(checkout_id, seller_id)``.
"""

import json
import uuid
from collections import defaultdict
from dataclasses import dataclass, field

from ordering.catalog.port import Catalog
from ordering.order.order import line_total

# Namespace for deriving order ids from (checkout, seller)
ORDER_ID_NAMESPACE = uuid.UUID("6f1c1b52-3c5e-4f0b-9a57-0d3f8c2a9e41")


@dataclass(frozen=True)
class PricedItem:
    cart_item_id: str
    product_id: str
    seller_id: str
    quantity: int
    unit_price: float
    checkout_id: str | None = None


@dataclass(frozen=True)
class SellerOrderSpec:
    order_id: str
    checkout_id: str
    seller_id: str
    items: tuple[PricedItem, ...] = field(default_factory=tuple)

    @property
    def total_amount(self) -> float:
        return line_total([{"unit_price": i.unit_price, "quantity": i.quantity} for i in self.items])

    @property
    def cart_item_ids(self) -> list[str]:
        return [i.cart_item_id for i in self.items]

    def items_json(self) -> str:
        return json.dumps(
            [{"product_id": i.product_id, "quantity": i.quantity, "unit_price": i.unit_price} for i in self.items]
        )


def derive_order_id(checkout_id: str, seller_id: str) -> str:
    """Same checkout and seller always yield the same order id."""
    return str(uuid.uuid5(ORDER_ID_NAMESPACE, f"{checkout_id}:{seller_id}"))


def price_cart_items(cart_items, catalog: Catalog) -> tuple[list[PricedItem], list[str]]:
    """Attach seller and current price to each cart item.

    Returns the priced items and the product ids that could not be resolved
    to a seller (unknown product, or product without a seller).
    """
    priced, unresolved = [], []
    for item in cart_items:
        product = catalog.get_product(str(item.product_id))
        if product is None or not product.seller_id:
            unresolved.append(str(item.product_id))
            continue

        priced.append(
            PricedItem(
                cart_item_id=str(item.id),
                product_id=str(item.product_id),
                seller_id=str(product.seller_id),
                quantity=item.quantity,
                unit_price=float(product.price),
                checkout_id=str(item.checkout_id) if item.checkout_id else None,
            )
        )
    return priced, unresolved


def split_by_seller(priced_items: list[PricedItem], checkout_tags: dict[str, str]) -> list[SellerOrderSpec]:
    """Group tagged items into one order spec per (checkout, seller).

    ``checkout_tags`` maps cart item id to checkout id. Groups come back in
    the order their first item appeared in the cart.
    """
    groups: dict[tuple[str, str], list[PricedItem]] = defaultdict(list)
    for item in priced_items:
        checkout_id = checkout_tags[item.cart_item_id]
        groups[(checkout_id, item.seller_id)].append(item)

    return [
        SellerOrderSpec(
            order_id=derive_order_id(checkout_id, seller_id),
            checkout_id=checkout_id,
            seller_id=seller_id,
            items=tuple(items),
        )
        for (checkout_id, seller_id), items in groups.items()
    ]
