"""PaymentTransaction aggregate — maps a gateway transaction id to its order.

Written only after the gateway accepted the session, so every stored
transaction id was actually handed to the processor. Callbacks resolve their
order through this record; parsing the id itself is only a fallback.
"""

from datetime import UTC, datetime

from protean.fields import DateTime, Float, Identifier, String

from ordering.domain import ordering
from ordering.payment.events import PaymentInitiated


@ordering.aggregate
class PaymentTransaction:
    tran_id = Identifier(identifier=True, required=True)
    order_id = Identifier(required=True)
    amount = Float(required=True, min_value=0.0)
    currency = String(max_length=3, default="BDT")
    gateway_name = String(max_length=50)
    gateway_session = String(max_length=255)
    initiated_at = DateTime()

    @classmethod
    def record(cls, tran_id, order, gateway_name, gateway_session=None):
        now = datetime.now(UTC)
        transaction = cls(
            tran_id=tran_id,
            order_id=str(order.id),
            amount=order.total_amount,
            currency=order.currency,
            gateway_name=gateway_name,
            gateway_session=gateway_session,
            initiated_at=now,
        )
        transaction.raise_(
            PaymentInitiated(
                tran_id=tran_id,
                order_id=str(order.id),
                buyer_id=str(order.buyer_id),
                seller_id=str(order.seller_id),
                amount=order.total_amount,
                currency=order.currency,
                gateway_name=gateway_name,
                initiated_at=now,
            )
        )
        return transaction
