"""ChatMessage aggregate (CQRS) — one message in an order's conversation.

Messages are immutable once posted. System messages generated from order
events carry a ``dedupe_key`` so a redelivered event never posts twice.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, String, Text

from messaging.chat.events import MessagePosted
from messaging.domain import messaging


class MessageKind(Enum):
    USER = "user"
    SYSTEM = "system"


@messaging.aggregate
class ChatMessage:
    order_id = Identifier(required=True)
    sender_id = Identifier(required=True)
    receiver_id = Identifier(required=True)
    text = Text(required=True)
    kind = String(choices=MessageKind, default=MessageKind.USER.value)
    dedupe_key = String(max_length=255)
    sent_at = DateTime()

    @classmethod
    def post(cls, order_id, sender_id, receiver_id, text, kind=MessageKind.USER.value, dedupe_key=None):
        if str(sender_id) == str(receiver_id):
            raise ValidationError({"receiver_id": ["A message must be addressed to the other party"]})
        if not text or not text.strip():
            raise ValidationError({"text": ["Message text is required"]})

        now = datetime.now(UTC)
        message = cls(
            order_id=order_id,
            sender_id=sender_id,
            receiver_id=receiver_id,
            text=text.strip(),
            kind=kind,
            dedupe_key=dedupe_key,
            sent_at=now,
        )
        message.raise_(
            MessagePosted(
                message_id=str(message.id),
                order_id=str(order_id),
                sender_id=str(sender_id),
                receiver_id=str(receiver_id),
                kind=kind,
                sent_at=now,
            )
        )
        return message


@messaging.repository(part_of=ChatMessage)
class ChatMessageRepository:
    def find_by_dedupe_key(self, dedupe_key) -> ChatMessage | None:
        return self._dao.query.filter(dedupe_key=dedupe_key).all().first

    def conversation(self, order_id) -> list[ChatMessage]:
        messages = self._dao.query.filter(order_id=str(order_id)).all().items
        return sorted(messages, key=lambda m: m.sent_at.timestamp() if m.sent_at else 0.0)
