"""FastAPI routes for the Messaging domain — order conversations."""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from messaging.api.schemas import ConversationResponse, MessageIdResponse, MessageResponse, PostMessageRequest
from messaging.chat.message import ChatMessage
from messaging.chat.posting import PostMessage
from shared.dependencies import current_actor

router = APIRouter(prefix="/conversations", tags=["conversations"])


@router.get("/{order_id}/messages", response_model=ConversationResponse)
async def list_messages(order_id: str, actor_id: str = Depends(current_actor)) -> ConversationResponse:
    """Messages on the order that the actor sent or received."""
    messages = current_domain.repository_for(ChatMessage).conversation(order_id)
    return ConversationResponse(
        order_id=order_id,
        messages=[
            MessageResponse(
                message_id=str(m.id),
                order_id=str(m.order_id),
                sender_id=str(m.sender_id),
                receiver_id=str(m.receiver_id),
                text=m.text,
                kind=m.kind,
                sent_at=m.sent_at,
            )
            for m in messages
            if actor_id in (str(m.sender_id), str(m.receiver_id))
        ],
    )


@router.post("/{order_id}/messages", status_code=201, response_model=MessageIdResponse)
async def post_message(
    order_id: str, body: PostMessageRequest, actor_id: str = Depends(current_actor)
) -> MessageIdResponse:
    command = PostMessage(
        order_id=order_id,
        sender_id=actor_id,
        receiver_id=body.receiver_id,
        text=body.text,
    )
    message_id = current_domain.process(command, asynchronous=False)
    return MessageIdResponse(message_id=message_id)
