"""Application tests for opening a payment session."""

import pytest
from ordering.order.order import Order
from ordering.payment.initiation import InitiatePayment
from ordering.payment.reconciliation import apply_payment_outcome
from ordering.payment.transaction import PaymentTransaction
from ordering.profiles import DeliveryInfo
from payments.transaction_ids import parse_order_id
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError
from shared.exceptions import GatewayInitError, UnauthorizedOrderAccessError


def _initiate(order_id, buyer_id="buyer-001"):
    return current_domain.process(InitiatePayment(order_id=order_id, buyer_id=buyer_id), asynchronous=False)


class TestSessionOpened:
    def test_returns_gateway_redirect(self, gateway, place_order):
        order_id = place_order()

        redirect_url = _initiate(order_id)

        assert redirect_url.startswith("https://gateway.test/checkout/")

    def test_request_carries_order_and_callbacks(self, gateway, place_order):
        order_id = place_order()
        _initiate(order_id)

        [request] = gateway.calls
        assert request.order_id == order_id
        assert request.amount == 120.0
        assert request.currency == "BDT"
        assert parse_order_id(request.tran_id) == order_id
        assert request.tran_id.startswith("VV_")
        assert request.success_url == f"http://testserver/orders/{order_id}/payment/success"
        assert request.fail_url == f"http://testserver/orders/{order_id}/payment/fail"
        assert request.cancel_url == f"http://testserver/orders/{order_id}/payment/cancel"
        assert request.ipn_url == "http://testserver/payments/ipn"

    def test_customer_details_from_profile(self, gateway, profiles, place_order):
        profiles.set_delivery_info(
            "buyer-001",
            DeliveryInfo(address="House 7", phone="017", name="Rahima", email="rahima@example.com"),
        )
        order_id = place_order()
        _initiate(order_id)

        customer = gateway.calls[0].customer
        assert customer.name == "Rahima"
        assert customer.email == "rahima@example.com"
        assert customer.address == "House 7, Road 3, Dhaka"

    def test_transaction_recorded(self, gateway, place_order):
        order_id = place_order()
        _initiate(order_id)

        tran_id = gateway.calls[0].tran_id
        transaction = current_domain.repository_for(PaymentTransaction).get(tran_id)
        assert str(transaction.order_id) == order_id
        assert transaction.gateway_name == "fake"

    def test_order_payment_status_unchanged(self, gateway, place_order):
        order_id = place_order()
        _initiate(order_id)

        assert current_domain.repository_for(Order).get(order_id).payment_status == "pending"

    def test_repeated_attempts_open_new_sessions(self, gateway, place_order):
        order_id = place_order()
        _initiate(order_id)
        _initiate(order_id)

        assert len(gateway.calls) == 2
        assert {parse_order_id(c.tran_id) for c in gateway.calls} == {order_id}


class TestSessionRefused:
    def test_gateway_failure(self, gateway, place_order):
        gateway.configure(should_succeed=False, failure_reason="Store is not active")
        order_id = place_order()

        with pytest.raises(GatewayInitError) as exc:
            _initiate(order_id)

        assert exc.value.order_id == order_id
        assert exc.value.reason == "Store is not active"
        assert exc.value.status_code == 502

    def test_no_transaction_recorded_on_failure(self, gateway, place_order):
        gateway.configure(should_succeed=False)
        order_id = place_order()

        with pytest.raises(GatewayInitError):
            _initiate(order_id)

        tran_id = gateway.calls[0].tran_id
        with pytest.raises(ObjectNotFoundError):
            current_domain.repository_for(PaymentTransaction).get(tran_id)
        assert current_domain.repository_for(Order).get(order_id).payment_status == "pending"

    def test_only_the_buyer_may_pay(self, gateway, place_order):
        order_id = place_order()

        with pytest.raises(UnauthorizedOrderAccessError):
            _initiate(order_id, buyer_id="farm-a")
        assert gateway.calls == []

    def test_settled_order_cannot_be_paid_again(self, gateway, place_order):
        order_id = place_order()
        apply_payment_outcome(order_id, "paid", "VV_x_1", channel="ipn")

        with pytest.raises(ValidationError):
            _initiate(order_id)
        assert gateway.calls == []
