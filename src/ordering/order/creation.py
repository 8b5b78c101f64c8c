"""Seller order creation — command and handler.

Order ids are derived from the checkout and the seller, so placing the same
order twice is a no-op that returns the existing id.
"""

import json

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class PlaceOrder:
    order_id = Identifier(required=True)
    checkout_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    items = Text(required=True)  # JSON list of {product_id, quantity, unit_price}
    delivery_address = String(required=True, max_length=500)
    delivery_phone = String(max_length=30)
    currency = String(max_length=3, default="BDT")


@ordering.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        repo = current_domain.repository_for(Order)

        try:
            existing = repo.get(command.order_id)
        except ObjectNotFoundError:
            existing = None

        if existing is not None:
            logger.info(
                "Order already placed for this checkout, skipping",
                order_id=str(command.order_id),
                checkout_id=str(command.checkout_id),
            )
            return str(existing.id)

        order = Order.create(
            order_id=command.order_id,
            buyer_id=command.buyer_id,
            seller_id=command.seller_id,
            checkout_id=command.checkout_id,
            items_data=json.loads(command.items),
            delivery={"address": command.delivery_address, "phone": command.delivery_phone},
            currency=command.currency,
        )
        repo.add(order)
        return str(order.id)
