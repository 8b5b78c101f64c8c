"""Payment initiation — open a gateway session for an order the buyer owns.

The order itself is never modified here; its payment status only moves when
the processor reports back through the redirect or the IPN.
"""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order, PaymentStatus
from ordering.payment.transaction import PaymentTransaction
from ordering.profiles import get_profiles
from payments.config import get_payment_settings
from payments.gateway import get_gateway
from payments.gateway.port import CustomerDetails, PaymentInitiation
from payments.transaction_ids import build_transaction_id
from shared.exceptions import GatewayInitError

logger = structlog.get_logger(__name__)


@ordering.command(part_of="PaymentTransaction")
class InitiatePayment:
    order_id = Identifier(required=True)
    buyer_id = Identifier(required=True)


def callback_urls(order_id: str) -> dict[str, str]:
    base_url = get_payment_settings().BASE_URL
    return {
        "success_url": f"{base_url}/orders/{order_id}/payment/success",
        "fail_url": f"{base_url}/orders/{order_id}/payment/fail",
        "cancel_url": f"{base_url}/orders/{order_id}/payment/cancel",
        "ipn_url": f"{base_url}/payments/ipn",
    }


def _customer_details(order: Order) -> CustomerDetails:
    settings = get_payment_settings()
    profile = get_profiles().get_delivery_info(str(order.buyer_id))
    return CustomerDetails(
        name=(profile.name if profile and profile.name else settings.DEFAULT_CUSTOMER_NAME),
        email=(profile.email if profile and profile.email else settings.DEFAULT_CUSTOMER_EMAIL),
        address=order.delivery.address if order.delivery else "",
        phone=(order.delivery.phone if order.delivery and order.delivery.phone else ""),
        city=settings.DEFAULT_CUSTOMER_CITY,
        country=settings.DEFAULT_CUSTOMER_COUNTRY,
    )


@ordering.command_handler(part_of=PaymentTransaction)
class InitiatePaymentHandler:
    @handle(InitiatePayment)
    def initiate_payment(self, command):
        order = current_domain.repository_for(Order).get(command.order_id)
        order.assert_buyer(command.buyer_id)

        if order.payment_status != PaymentStatus.PENDING.value:
            raise ValidationError({"payment_status": [f"Order payment is already {order.payment_status}"]})

        settings = get_payment_settings()
        gateway = get_gateway()
        tran_id = build_transaction_id(settings.TRANSACTION_PREFIX, str(order.id))

        result = gateway.initiate(
            PaymentInitiation(
                tran_id=tran_id,
                order_id=str(order.id),
                amount=order.total_amount,
                currency=order.currency,
                product_name=f"Order {order.id}",
                product_category=settings.PRODUCT_CATEGORY,
                customer=_customer_details(order),
                **callback_urls(str(order.id)),
            )
        )

        if not result.success or not result.redirect_url:
            logger.warning(
                "Gateway refused payment session",
                order_id=str(order.id),
                tran_id=tran_id,
                gateway=gateway.name,
                reason=result.failure_reason,
            )
            raise GatewayInitError(str(order.id), result.failure_reason)

        transaction = PaymentTransaction.record(
            tran_id=tran_id,
            order=order,
            gateway_name=gateway.name,
            gateway_session=result.session_key,
        )
        current_domain.repository_for(PaymentTransaction).add(transaction)

        logger.info(
            "Payment session opened",
            order_id=str(order.id),
            tran_id=tran_id,
            gateway=gateway.name,
        )
        return result.redirect_url
