"""Order aggregate (CQRS) — one seller's share of a buyer's checkout.

An Order carries two independent state machines:

Payment (lattice merge, settled once):
    PENDING → PAID | FAILED | CANCELLED
    Re-applying the stored outcome is a no-op; a different outcome after
    settlement is a conflict and leaves the order untouched.

Fulfillment (seller-driven):
    PENDING → CONFIRMED | PROCESSING
    CONFIRMED → PROCESSING | SHIPPED
    PROCESSING → SHIPPED
    SHIPPED → DELIVERED
    CANCELLED from any state before DELIVERED

Prices and the delivery address are frozen at creation; catalog or profile
changes never touch an existing order.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import (
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    ValueObject,
)

from ordering.domain import ordering
from ordering.order.events import OrderPlaced, OrderStatusAdvanced, PaymentReconciled
from shared.exceptions import ReconciliationConflictError, UnauthorizedOrderAccessError


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    CANCELLED = "cancelled"


_SETTLED_PAYMENT_STATES = {
    PaymentStatus.PAID,
    PaymentStatus.FAILED,
    PaymentStatus.CANCELLED,
}

_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.PROCESSING, OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED, OrderStatus.CANCELLED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}


def line_total(items_data) -> float:
    """Order total from ``[{quantity, unit_price}, ...]``, rounded to cents."""
    return round(sum(item["unit_price"] * item["quantity"] for item in items_data), 2)


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@ordering.value_object(part_of="Order")
class DeliveryDetails:
    """Where and how to reach the buyer, captured once at checkout."""

    address = String(required=True, max_length=500)
    phone = String(max_length=30)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderItem:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)  # Frozen from the catalog


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    buyer_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    checkout_id = Identifier()
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    total_amount = Float(required=True, min_value=0.0)
    currency = String(max_length=3, default="BDT")
    items = HasMany(OrderItem)
    delivery = ValueObject(DeliveryDetails)
    transaction_id = String(max_length=255)  # Written once, when payment settles as paid
    payment_channel = String(max_length=20)
    payment_settled_at = DateTime()
    order_date = DateTime()
    updated_at = DateTime()

    @invariant.post
    def total_must_match_line_items(self):
        if self.items and round(self.total_amount, 2) != line_total(
            [{"unit_price": i.unit_price, "quantity": i.quantity} for i in self.items]
        ):
            raise ValidationError({"total_amount": ["Order total does not match its line items"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, order_id, buyer_id, seller_id, items_data, delivery, checkout_id=None, currency="BDT"):
        """Create a seller order with prices frozen from ``items_data``.

        Args:
            order_id: Deterministic id derived from checkout and seller.
            items_data: List of dicts with product_id, quantity, unit_price.
            delivery: Dict with address and phone.
        """
        if not items_data:
            raise ValidationError({"items": ["An order needs at least one item"]})

        now = datetime.now(UTC)
        total = line_total(items_data)

        order = cls(
            id=order_id,
            buyer_id=buyer_id,
            seller_id=seller_id,
            checkout_id=checkout_id,
            status=OrderStatus.PENDING.value,
            payment_status=PaymentStatus.PENDING.value,
            total_amount=total,
            currency=currency,
            items=[
                OrderItem(
                    product_id=item["product_id"],
                    quantity=item["quantity"],
                    unit_price=item["unit_price"],
                )
                for item in items_data
            ],
            delivery=DeliveryDetails(address=delivery["address"], phone=delivery.get("phone")),
            order_date=now,
            updated_at=now,
        )

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                checkout_id=str(checkout_id) if checkout_id else None,
                buyer_id=str(buyer_id),
                seller_id=str(seller_id),
                total_amount=total,
                currency=currency,
                item_count=len(items_data),
                items=json.dumps(
                    [
                        {
                            "product_id": str(item["product_id"]),
                            "quantity": item["quantity"],
                            "unit_price": item["unit_price"],
                        }
                        for item in items_data
                    ]
                ),
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Access
    # -------------------------------------------------------------------
    def is_party(self, actor_id) -> bool:
        return str(actor_id) in (str(self.buyer_id), str(self.seller_id))

    def assert_party(self, actor_id):
        if not self.is_party(actor_id):
            raise UnauthorizedOrderAccessError(str(self.id), str(actor_id))

    def assert_buyer(self, actor_id):
        if str(actor_id) != str(self.buyer_id):
            raise UnauthorizedOrderAccessError(str(self.id), str(actor_id), role="buyer")

    def assert_seller(self, actor_id):
        if str(actor_id) != str(self.seller_id):
            raise UnauthorizedOrderAccessError(str(self.id), str(actor_id), role="seller")

    # -------------------------------------------------------------------
    # Payment reconciliation
    # -------------------------------------------------------------------
    def reconcile_payment(self, outcome, transaction_id=None, channel=None) -> bool:
        """Merge a terminal payment outcome into the order.

        Returns True when the payment status changed, False when the same
        outcome was already stored. Raises ReconciliationConflictError when
        a different outcome was already stored.
        """
        target = PaymentStatus(outcome)
        if target not in _SETTLED_PAYMENT_STATES:
            raise ValidationError({"payment_status": [f"{target.value} is not a payment outcome"]})

        current = PaymentStatus(self.payment_status)
        if current == target:
            return False
        if current in _SETTLED_PAYMENT_STATES:
            raise ReconciliationConflictError(str(self.id), current.value, target.value)

        now = datetime.now(UTC)
        self.payment_status = target.value
        if target == PaymentStatus.PAID and transaction_id and not self.transaction_id:
            self.transaction_id = transaction_id
        self.payment_channel = channel
        self.payment_settled_at = now
        self.updated_at = now

        self.raise_(
            PaymentReconciled(
                order_id=str(self.id),
                buyer_id=str(self.buyer_id),
                seller_id=str(self.seller_id),
                payment_status=target.value,
                transaction_id=self.transaction_id,
                channel=channel,
                total_amount=self.total_amount,
                currency=self.currency,
                reconciled_at=now,
            )
        )
        return True

    # -------------------------------------------------------------------
    # Fulfillment
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    def advance(self, next_status, actor_id):
        """Move the order forward in fulfillment on behalf of its seller."""
        self.assert_seller(actor_id)

        try:
            target = OrderStatus(next_status)
        except ValueError:
            raise ValidationError({"status": [f"Unknown order status {next_status}"]}) from None
        self._assert_can_transition(target)

        previous = self.status
        now = datetime.now(UTC)
        self.status = target.value
        self.updated_at = now

        self.raise_(
            OrderStatusAdvanced(
                order_id=str(self.id),
                buyer_id=str(self.buyer_id),
                seller_id=str(self.seller_id),
                previous_status=previous,
                new_status=target.value,
                advanced_at=now,
            )
        )


@ordering.repository(part_of=Order)
class OrderRepository:
    def find_for_buyer(self, buyer_id, status=None) -> list[Order]:
        filters = {"buyer_id": str(buyer_id)}
        if status:
            filters["status"] = status
        return self._dao.query.filter(**filters).all().items

    def find_for_seller(self, seller_id, status=None) -> list[Order]:
        filters = {"seller_id": str(seller_id)}
        if status:
            filters["status"] = status
        return self._dao.query.filter(**filters).all().items
