"""Posting messages — command and handler."""

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from messaging.chat.message import ChatMessage, MessageKind
from messaging.domain import messaging


@messaging.command(part_of="ChatMessage")
class PostMessage:
    order_id = Identifier(required=True)
    sender_id = Identifier(required=True)
    receiver_id = Identifier(required=True)
    text = Text(required=True)
    kind = String(choices=MessageKind, default=MessageKind.USER.value)
    dedupe_key = String(max_length=255)


@messaging.command_handler(part_of=ChatMessage)
class PostMessageHandler:
    @handle(PostMessage)
    def post_message(self, command):
        repo = current_domain.repository_for(ChatMessage)

        if command.dedupe_key:
            existing = repo.find_by_dedupe_key(command.dedupe_key)
            if existing is not None:
                return str(existing.id)

        message = ChatMessage.post(
            order_id=command.order_id,
            sender_id=command.sender_id,
            receiver_id=command.receiver_id,
            text=command.text,
            kind=command.kind,
            dedupe_key=command.dedupe_key,
        )
        repo.add(message)
        return str(message.id)
