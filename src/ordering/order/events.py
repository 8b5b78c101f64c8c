"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderPlaced:
    """A seller order was created from a buyer's checkout.

    Prices in ``items`` are the catalog prices at the moment of checkout.
    """

    __version__ = 1

    order_id = Identifier(required=True)
    checkout_id = Identifier()
    buyer_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    total_amount = Float(required=True)
    currency = String(default="BDT")
    item_count = Integer(required=True)
    items = Text(required=True)  # JSON list of {product_id, quantity, unit_price}
    placed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class PaymentReconciled:
    """The order's payment settled as paid, failed or cancelled."""

    __version__ = 1

    order_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    payment_status = String(required=True)
    transaction_id = String()
    channel = String()  # "redirect" or "ipn"
    total_amount = Float()
    currency = String(default="BDT")
    reconciled_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderStatusAdvanced:
    """The seller moved the order to its next fulfillment status."""

    __version__ = 1

    order_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    advanced_at = DateTime(required=True)
