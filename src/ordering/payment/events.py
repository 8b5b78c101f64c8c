"""Domain events for the PaymentTransaction aggregate."""

from protean.fields import DateTime, Float, Identifier, String

from ordering.domain import ordering


@ordering.event(part_of="PaymentTransaction")
class PaymentInitiated:
    """The gateway accepted a payment session for an order."""

    __version__ = 1

    tran_id = String(required=True)
    order_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    amount = Float(required=True)
    currency = String(default="BDT")
    gateway_name = String()
    initiated_at = DateTime(required=True)
