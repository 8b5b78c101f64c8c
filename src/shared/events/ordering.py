"""Cross-domain event contracts for Ordering domain events.

These classes define the event shape for consumption by other domains
(the Messaging domain posts order-lifecycle messages into the order chat).
They are registered as external events via domain.register_external_event()
with matching __type__ strings so Protean's stream deserialization works
correctly.

The source-of-truth events are in src/ordering/order/events.py and
src/ordering/payment/events.py.
"""

from protean.core.event import BaseEvent
from protean.fields import DateTime, Float, Identifier, Integer, String


class OrderPlaced(BaseEvent):
    """A seller order was created from a buyer's checkout."""

    __version__ = 1

    order_id = Identifier(required=True)
    checkout_id = Identifier()
    buyer_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    total_amount = Float(required=True)
    currency = String(default="BDT")
    item_count = Integer(required=True)
    placed_at = DateTime(required=True)


class PaymentReconciled(BaseEvent):
    """An order's payment reached a terminal outcome."""

    __version__ = 1

    order_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    payment_status = String(required=True)
    transaction_id = String()
    channel = String()
    total_amount = Float()
    currency = String(default="BDT")
    reconciled_at = DateTime(required=True)


class OrderStatusAdvanced(BaseEvent):
    """A seller moved an order forward in fulfillment (or cancelled it)."""

    __version__ = 1

    order_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    advanced_at = DateTime(required=True)


class PaymentInitiated(BaseEvent):
    """A buyer opened a gateway payment session for an order."""

    __version__ = 1

    tran_id = String(required=True)
    order_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    amount = Float(required=True)
    currency = String(default="BDT")
    initiated_at = DateTime(required=True)
