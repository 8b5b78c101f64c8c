"""Order fulfillment — the seller advances an order's status."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order, OrderStatus


@ordering.command(part_of="Order")
class AdvanceOrderStatus:
    order_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    next_status = String(required=True, choices=OrderStatus)


@ordering.command_handler(part_of=Order)
class FulfillmentHandler:
    @handle(AdvanceOrderStatus)
    def advance_order_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.advance(command.next_status, actor_id=command.seller_id)
        repo.add(order)
        return order.status
