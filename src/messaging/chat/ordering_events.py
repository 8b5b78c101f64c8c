"""Inbound cross-domain event handlers — Messaging reacts to Ordering events.

Each lifecycle event becomes a system message in the order's conversation,
addressed to the party who did not cause it. Posting is best effort: a
failure is logged and never reaches the ordering side.
"""

import structlog
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from messaging.chat.message import ChatMessage, MessageKind
from messaging.chat.posting import PostMessage
from messaging.chat.templates import (
    OrderPlacedTemplate,
    PaymentInitiatedTemplate,
    PaymentOutcomeTemplate,
    StatusUpdateTemplate,
)
from messaging.domain import messaging
from shared.events.ordering import OrderPlaced, OrderStatusAdvanced, PaymentInitiated, PaymentReconciled

logger = structlog.get_logger(__name__)

messaging.register_external_event(OrderPlaced, "Ordering.OrderPlaced.v1")
messaging.register_external_event(PaymentReconciled, "Ordering.PaymentReconciled.v1")
messaging.register_external_event(OrderStatusAdvanced, "Ordering.OrderStatusAdvanced.v1")
messaging.register_external_event(PaymentInitiated, "Ordering.PaymentInitiated.v1")


def post_system_message(order_id, sender_id, receiver_id, text, dedupe_key) -> str | None:
    """Post a system message; returns its id, or None if posting failed."""
    try:
        return current_domain.process(
            PostMessage(
                order_id=str(order_id),
                sender_id=str(sender_id),
                receiver_id=str(receiver_id),
                text=text,
                kind=MessageKind.SYSTEM.value,
                dedupe_key=dedupe_key,
            ),
            asynchronous=False,
        )
    except Exception:
        logger.exception(
            "Failed to post order message",
            order_id=str(order_id),
            dedupe_key=dedupe_key,
        )
        return None


@messaging.event_handler(part_of=ChatMessage, stream_category="ordering::order")
class OrderingEventsHandler:
    """Posts order placement, payment and fulfillment updates into the chat."""

    @handle(OrderPlaced)
    def on_order_placed(self, event: OrderPlaced) -> None:
        post_system_message(
            order_id=event.order_id,
            sender_id=event.buyer_id,
            receiver_id=event.seller_id,
            text=OrderPlacedTemplate.render(event.to_dict()),
            dedupe_key=f"{event.order_id}:placed",
        )

    @handle(PaymentReconciled)
    def on_payment_reconciled(self, event: PaymentReconciled) -> None:
        post_system_message(
            order_id=event.order_id,
            sender_id=event.buyer_id,
            receiver_id=event.seller_id,
            text=PaymentOutcomeTemplate.render(event.to_dict()),
            dedupe_key=f"{event.order_id}:payment:{event.payment_status}",
        )

    @handle(OrderStatusAdvanced)
    def on_order_status_advanced(self, event: OrderStatusAdvanced) -> None:
        post_system_message(
            order_id=event.order_id,
            sender_id=event.seller_id,
            receiver_id=event.buyer_id,
            text=StatusUpdateTemplate.render(event.to_dict()),
            dedupe_key=f"{event.order_id}:status:{event.new_status}",
        )


@messaging.event_handler(part_of=ChatMessage, stream_category="ordering::payment_transaction")
class PaymentTransactionEventsHandler:
    @handle(PaymentInitiated)
    def on_payment_initiated(self, event: PaymentInitiated) -> None:
        post_system_message(
            order_id=event.order_id,
            sender_id=event.buyer_id,
            receiver_id=event.seller_id,
            text=PaymentInitiatedTemplate.render(event.to_dict()),
            dedupe_key=f"{event.order_id}:payment-initiated:{event.tran_id}",
        )
