"""FastAPI routes for the Ordering domain — cart, orders and payment callbacks."""

from typing import Literal

import structlog
from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import JSONResponse, RedirectResponse
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from ordering.api.schemas import (
    AddToCartRequest,
    AdvanceOrderStatusRequest,
    CartItemSchema,
    CartResponse,
    CheckoutResponse,
    DeliverySchema,
    NotificationAckResponse,
    OrderDetailResponse,
    OrderItemSchema,
    OrderListResponse,
    OrderStatusResponse,
    OrderSummaryResponse,
    PaymentSessionResponse,
    StatusResponse,
    UpdateCartQuantityRequest,
)
from ordering.cart.cart import ShoppingCart
from ordering.cart.items import AddToCart, RemoveFromCart, UpdateCartQuantity
from ordering.checkout.service import checkout
from ordering.order.fulfillment import AdvanceOrderStatus
from ordering.order.order import Order
from ordering.payment.initiation import InitiatePayment
from ordering.payment.reconciliation import apply_payment_outcome, resolve_order_id
from payments.callbacks import CallbackChannel, interpret_notification, interpret_redirect, redirect_outcome
from payments.config import get_payment_settings
from payments.gateway import get_gateway
from shared.dependencies import current_actor
from shared.exceptions import MissingOrderIdentifierError
from shared.logging import add_context, clear_context

logger = structlog.get_logger(__name__)

RedirectChannel = Literal["success", "fail", "cancel"]


def _order_summary(order: Order) -> OrderSummaryResponse:
    return OrderSummaryResponse(
        order_id=str(order.id),
        buyer_id=str(order.buyer_id),
        seller_id=str(order.seller_id),
        status=order.status,
        payment_status=order.payment_status,
        total_amount=order.total_amount,
        currency=order.currency,
        order_date=order.order_date,
    )


def _order_detail(order: Order) -> OrderDetailResponse:
    return OrderDetailResponse(
        **_order_summary(order).model_dump(),
        checkout_id=str(order.checkout_id) if order.checkout_id else None,
        transaction_id=order.transaction_id,
        delivery=DeliverySchema(address=order.delivery.address, phone=order.delivery.phone) if order.delivery else None,
        items=[
            OrderItemSchema(product_id=str(i.product_id), quantity=i.quantity, unit_price=i.unit_price)
            for i in order.items
        ],
    )


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.get("", response_model=CartResponse)
async def view_cart(buyer_id: str = Depends(current_actor)) -> CartResponse:
    cart = current_domain.repository_for(ShoppingCart).find_for_buyer(buyer_id)
    if cart is None:
        return CartResponse(buyer_id=buyer_id)
    return CartResponse(
        cart_id=str(cart.id),
        buyer_id=buyer_id,
        items=[
            CartItemSchema(
                item_id=str(i.id),
                product_id=str(i.product_id),
                quantity=i.quantity,
                checkout_id=str(i.checkout_id) if i.checkout_id else None,
            )
            for i in cart.items
        ],
    )


@cart_router.post("/items", response_model=StatusResponse)
async def add_cart_item(body: AddToCartRequest, buyer_id: str = Depends(current_actor)) -> StatusResponse:
    command = AddToCart(
        buyer_id=buyer_id,
        product_id=body.product_id,
        quantity=body.quantity,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@cart_router.put("/items/{product_id}", response_model=StatusResponse)
async def update_cart_item_quantity(
    product_id: str, body: UpdateCartQuantityRequest, buyer_id: str = Depends(current_actor)
) -> StatusResponse:
    command = UpdateCartQuantity(
        buyer_id=buyer_id,
        product_id=product_id,
        new_quantity=body.new_quantity,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@cart_router.delete("/items/{product_id}", response_model=StatusResponse)
async def remove_cart_item(product_id: str, buyer_id: str = Depends(current_actor)) -> StatusResponse:
    current_domain.process(RemoveFromCart(buyer_id=buyer_id, product_id=product_id), asynchronous=False)
    return StatusResponse()


@cart_router.post("/checkout", status_code=201, response_model=CheckoutResponse)
async def checkout_cart(buyer_id: str = Depends(current_actor)) -> CheckoutResponse:
    """Place one order per seller for everything in the cart."""
    result = checkout(buyer_id)
    return CheckoutResponse(order_ids=result.order_ids, skipped_product_ids=result.skipped_product_ids)


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.get("", response_model=OrderListResponse)
async def list_orders(
    role: Literal["buyer", "seller"] = "buyer",
    status: str | None = None,
    actor_id: str = Depends(current_actor),
) -> OrderListResponse:
    repo = current_domain.repository_for(Order)
    if role == "seller":
        orders = repo.find_for_seller(actor_id, status=status)
    else:
        orders = repo.find_for_buyer(actor_id, status=status)

    orders = sorted(orders, key=lambda o: o.order_date.timestamp() if o.order_date else 0.0, reverse=True)
    return OrderListResponse(orders=[_order_summary(o) for o in orders])


@order_router.get("/{order_id}", response_model=OrderDetailResponse)
async def get_order(order_id: str, actor_id: str = Depends(current_actor)) -> OrderDetailResponse:
    order = current_domain.repository_for(Order).get(order_id)
    order.assert_party(actor_id)
    return _order_detail(order)


@order_router.put("/{order_id}/status", response_model=OrderStatusResponse)
async def advance_order_status(
    order_id: str, body: AdvanceOrderStatusRequest, seller_id: str = Depends(current_actor)
) -> OrderStatusResponse:
    command = AdvanceOrderStatus(
        order_id=order_id,
        seller_id=seller_id,
        next_status=body.status,
    )
    new_status = current_domain.process(command, asynchronous=False)
    return OrderStatusResponse(order_id=order_id, status=new_status)


@order_router.post("/{order_id}/payment", response_model=PaymentSessionResponse)
async def initiate_payment(order_id: str, buyer_id: str = Depends(current_actor)) -> PaymentSessionResponse:
    """Open a gateway session; the client sends the buyer to ``redirect_url``."""
    redirect_url = current_domain.process(InitiatePayment(order_id=order_id, buyer_id=buyer_id), asynchronous=False)
    return PaymentSessionResponse(order_id=order_id, redirect_url=redirect_url)


# ---------------------------------------------------------------------------
# Payment callbacks
# ---------------------------------------------------------------------------
def _redirect(path: str, outcome: str) -> RedirectResponse:
    return RedirectResponse(url=f"{get_payment_settings().BASE_URL}{path}?payment={outcome}", status_code=303)


def _handle_payment_redirect(
    channel: str,
    routed_order_id: str | None,
    status: str | None,
    tran_id: str | None,
    error: str | None,
) -> RedirectResponse:
    """Reconcile a browser redirect and send the buyer to their order page.

    Never fails: anything that cannot be reconciled ends on the generic
    error view.
    """
    outcome = interpret_redirect(CallbackChannel(channel), status, error)
    add_context(channel=channel, tran_id=tran_id)

    order_id = routed_order_id
    try:
        try:
            order_id = resolve_order_id(routed_order_id, tran_id)
        except MissingOrderIdentifierError:
            logger.warning("Payment redirect does not identify an order", status=status)
            return _redirect("/orders", "error")

        add_context(order_id=order_id)
        if outcome is None:
            logger.warning("Payment redirect carried no outcome", status=status)
            return _redirect(f"/orders/{order_id}", "error")

        result = apply_payment_outcome(order_id, outcome, tran_id, channel="redirect")
    except ObjectNotFoundError:
        logger.warning("Payment redirect for unknown order", routed_order_id=routed_order_id)
        return _redirect("/orders", "error")
    except Exception:
        logger.exception("Payment redirect could not be reconciled")
        return _redirect(f"/orders/{order_id}" if order_id else "/orders", "error")
    finally:
        clear_context()

    return _redirect(f"/orders/{order_id}", redirect_outcome(result.payment_status))


@order_router.post("/{order_id}/payment/{channel}", status_code=303)
async def order_payment_redirect(
    order_id: str,
    channel: RedirectChannel,
    status: str | None = Form(None),
    tran_id: str | None = Form(None),
    error: str | None = Form(None),
) -> RedirectResponse:
    return _handle_payment_redirect(channel, order_id, status, tran_id, error)


payment_router = APIRouter(prefix="/payments", tags=["payments"])


@payment_router.post("/ipn", response_model=NotificationAckResponse)
async def payment_notification(request: Request):
    """Server-to-server payment notification.

    Acknowledged (200) unless storage fails; a non-2xx answer makes the
    processor retry.
    """
    form = await request.form()
    payload = {key: str(value) for key, value in form.items()}
    status = payload.get("status")
    tran_id = payload.get("tran_id")

    if get_payment_settings().VERIFY_IPN_SIGNATURE and not get_gateway().verify_notification(payload):
        logger.warning("IPN signature could not be verified", tran_id=tran_id)
        return NotificationAckResponse(status="ignored", message="Unverified notification")

    outcome = interpret_notification(status)
    if outcome is None:
        logger.info("IPN without a payable status acknowledged", tran_id=tran_id, status=status)
        return NotificationAckResponse(status="acknowledged", message=f"No state change for status {status}")

    try:
        order_id = resolve_order_id(None, tran_id)
        result = apply_payment_outcome(order_id, outcome, tran_id, channel="ipn")
    except MissingOrderIdentifierError:
        logger.warning("IPN does not identify an order", tran_id=tran_id)
        return NotificationAckResponse(status="ignored", message="Unknown transaction")
    except ObjectNotFoundError:
        logger.warning("IPN for unknown order", tran_id=tran_id)
        return NotificationAckResponse(status="ignored", message="Unknown order")
    except Exception:
        logger.exception("IPN could not be processed", tran_id=tran_id)
        return JSONResponse(status_code=500, content={"status": "error", "message": "IPN error"})

    return NotificationAckResponse(
        status="acknowledged",
        message="Payment state recorded",
        payment_status=result.payment_status,
    )


@payment_router.post("/{channel}", status_code=303)
async def payment_redirect(
    channel: RedirectChannel,
    status: str | None = Form(None),
    tran_id: str | None = Form(None),
    error: str | None = Form(None),
) -> RedirectResponse:
    """Redirect callback without an order id in the URL; resolved from ``tran_id``."""
    return _handle_payment_redirect(channel, None, status, tran_id, error)
