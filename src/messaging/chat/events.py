"""Domain events for the ChatMessage aggregate."""

from protean.fields import DateTime, Identifier, String

from messaging.domain import messaging


@messaging.event(part_of="ChatMessage")
class MessagePosted:
    """A message was posted into an order's conversation."""

    __version__ = 1

    message_id = Identifier(required=True)
    order_id = Identifier(required=True)
    sender_id = Identifier(required=True)
    receiver_id = Identifier(required=True)
    kind = String(required=True)
    sent_at = DateTime(required=True)
