"""Pydantic request/response schemas for the Ordering API.

These are external contracts (anti-corruption layer) — separate from
internal Protean commands.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class DeliverySchema(BaseModel):
    address: str
    phone: str | None = None


class OrderItemSchema(BaseModel):
    product_id: str
    quantity: int = Field(ge=1)
    unit_price: float = Field(ge=0)


class CartItemSchema(BaseModel):
    item_id: str
    product_id: str
    quantity: int
    checkout_id: str | None = None


# ---------------------------------------------------------------------------
# Cart Request Schemas
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    product_id: str
    quantity: int = Field(ge=1, default=1)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "product_id": "prod-tomato-001",
                    "quantity": 2,
                }
            ]
        }
    }


class UpdateCartQuantityRequest(BaseModel):
    new_quantity: int = Field(ge=1)


# ---------------------------------------------------------------------------
# Order Request Schemas
# ---------------------------------------------------------------------------
class AdvanceOrderStatusRequest(BaseModel):
    status: Literal["confirmed", "processing", "shipped", "delivered", "cancelled"]


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class StatusResponse(BaseModel):
    status: str = "ok"


class CartResponse(BaseModel):
    cart_id: str | None = None
    buyer_id: str
    items: list[CartItemSchema] = []


class CheckoutResponse(BaseModel):
    order_ids: list[str]
    skipped_product_ids: list[str] = []


class OrderSummaryResponse(BaseModel):
    order_id: str
    buyer_id: str
    seller_id: str
    status: str
    payment_status: str
    total_amount: float
    currency: str
    order_date: datetime | None = None


class OrderDetailResponse(OrderSummaryResponse):
    checkout_id: str | None = None
    transaction_id: str | None = None
    delivery: DeliverySchema | None = None
    items: list[OrderItemSchema] = []


class OrderListResponse(BaseModel):
    orders: list[OrderSummaryResponse]


class OrderStatusResponse(BaseModel):
    order_id: str
    status: str


class PaymentSessionResponse(BaseModel):
    order_id: str
    redirect_url: str


class NotificationAckResponse(BaseModel):
    status: Literal["acknowledged", "ignored"]
    message: str
    payment_status: str | None = None
