"""Checkout — turn a buyer's cart into one order per seller.

Steps:
1. Load the cart and the buyer's delivery details.
2. Price every item against the catalog; unresolvable items are skipped.
3. Tag the priced items with a checkout id (resumed attempts keep theirs).
4. Place one order per (checkout, seller), each in its own unit of work.
5. When every order exists, take the ordered quantities out of the cart.

Orders are not rolled back when a sibling fails. The caller gets a
CheckoutIncompleteError naming what was created, the cart stays intact,
and a retry places only the missing orders.
"""

import json
from dataclasses import dataclass, field

import structlog
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from ordering.cart.cart import ShoppingCart
from ordering.cart.conversion import BeginCheckout, CompleteCheckout
from ordering.catalog import get_catalog
from ordering.checkout.splitter import price_cart_items, split_by_seller
from ordering.order.creation import PlaceOrder
from ordering.order.order import Order
from ordering.profiles import get_profiles
from payments.config import get_payment_settings
from shared.exceptions import CheckoutIncompleteError, EmptyCartError

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CheckoutResult:
    order_ids: list[str]
    skipped_product_ids: list[str] = field(default_factory=list)


def _ordered_quantities(specs) -> dict[str, int]:
    """Map each cart item id to the quantity its stored order actually holds.

    A resumed checkout finds orders placed by an earlier attempt; the cart
    may have grown since, so only what the order took is removed.
    """
    repo = current_domain.repository_for(Order)
    ordered = {}
    for spec in specs:
        held = {str(item.product_id): item.quantity for item in repo.get(spec.order_id).items}
        for item in spec.items:
            ordered[item.cart_item_id] = held.get(item.product_id, 0)
    return ordered

def checkout(buyer_id: str) -> CheckoutResult:
    cart = current_domain.repository_for(ShoppingCart).find_for_buyer(buyer_id)
    if cart is None or not cart.items:
        raise EmptyCartError()

    delivery = get_profiles().get_delivery_info(buyer_id)
    if delivery is None or not delivery.address:
        raise ValidationError({"delivery": ["A delivery address is required to check out"]})

    priced, unresolved = price_cart_items(cart.items, get_catalog())
    for product_id in unresolved:
        logger.warning(
            "Skipping cart item without a resolvable seller",
            buyer_id=str(buyer_id),
            cart_id=str(cart.id),
            product_id=product_id,
        )
    if not priced:
        raise EmptyCartError("None of the cart items can currently be ordered")

    tags = current_domain.process(
        BeginCheckout(
            cart_id=str(cart.id),
            item_ids=json.dumps([item.cart_item_id for item in priced]),
        ),
        asynchronous=False,
    )
    specs = split_by_seller(priced, tags)
    currency = get_payment_settings().CURRENCY

    created, failed = [], []
    for spec in specs:
        try:
            current_domain.process(
                PlaceOrder(
                    order_id=spec.order_id,
                    checkout_id=spec.checkout_id,
                    buyer_id=str(buyer_id),
                    seller_id=spec.seller_id,
                    items=spec.items_json(),
                    delivery_address=delivery.address,
                    delivery_phone=delivery.phone,
                    currency=currency,
                ),
                asynchronous=False,
            )
            created.append(spec)
        except Exception:
            logger.exception(
                "Seller order could not be placed",
                buyer_id=str(buyer_id),
                checkout_id=spec.checkout_id,
                seller_id=spec.seller_id,
            )
            failed.append(spec)

    if failed:
        raise CheckoutIncompleteError(
            created_order_ids=[spec.order_id for spec in created],
            failed_seller_ids=[spec.seller_id for spec in failed],
        )

    try:
        current_domain.process(
            CompleteCheckout(cart_id=str(cart.id), ordered_quantities=json.dumps(_ordered_quantities(created))),
            asynchronous=False,
        )
    except Exception:
        # Orders exist; leftover tagged items resolve to the same orders on the next checkout.
        logger.exception("Cart cleanup after checkout failed", buyer_id=str(buyer_id), cart_id=str(cart.id))

    order_ids = [spec.order_id for spec in created]
    logger.info(
        "Checkout completed",
        buyer_id=str(buyer_id),
        order_ids=order_ids,
        skipped=len(unresolved),
    )
    return CheckoutResult(order_ids=order_ids, skipped_product_ids=unresolved)
