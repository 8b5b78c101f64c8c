"""Pydantic request/response schemas for the Messaging API."""

from datetime import datetime

from pydantic import BaseModel, Field


class PostMessageRequest(BaseModel):
    receiver_id: str
    text: str = Field(min_length=1, max_length=2000)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "receiver_id": "seller-001",
                    "text": "Can you deliver before noon?",
                }
            ]
        }
    }


class MessageIdResponse(BaseModel):
    message_id: str


class MessageResponse(BaseModel):
    message_id: str
    order_id: str
    sender_id: str
    receiver_id: str
    text: str
    kind: str
    sent_at: datetime | None = None


class ConversationResponse(BaseModel):
    order_id: str
    messages: list[MessageResponse]
