"""Tests for the payment gateway adapters."""

import hashlib
from urllib.parse import parse_qs

import httpx
import pytest
from payments.gateway import get_gateway, reset_gateway
from payments.gateway.fake_adapter import FakeGateway
from payments.gateway.port import CustomerDetails, PaymentInitiation
from payments.gateway.sslcommerz_adapter import SSLCommerzGateway

API_URL = "https://sandbox.sslcommerz.com/gwprocess/v4/api.php"


@pytest.fixture()
def initiation():
    return PaymentInitiation(
        tran_id="VV_ord-1_1700000000000",
        order_id="ord-1",
        amount=120.5,
        currency="BDT",
        product_name="Order ord-1",
        product_category="Food",
        success_url="http://testserver/orders/ord-1/payment/success",
        fail_url="http://testserver/orders/ord-1/payment/fail",
        cancel_url="http://testserver/orders/ord-1/payment/cancel",
        ipn_url="http://testserver/payments/ipn",
        customer=CustomerDetails(
            name="Rahima",
            email="rahima@example.com",
            address="House 7",
            phone="01711111111",
            city="Dhaka",
            country="Bangladesh",
        ),
    )


def _sslcommerz(handler):
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return SSLCommerzGateway(store_id="testbox", store_passwd="qwerty", api_url=API_URL, client=client)


class TestFakeGateway:
    def test_succeeds_by_default(self, initiation):
        gateway = FakeGateway()
        result = gateway.initiate(initiation)

        assert result.success is True
        assert result.redirect_url == f"https://gateway.test/checkout/{result.session_key}"
        assert gateway.calls == [initiation]

    def test_configured_failure(self, initiation):
        gateway = FakeGateway()
        gateway.configure(should_succeed=False, failure_reason="Store is not active")

        result = gateway.initiate(initiation)

        assert result.success is False
        assert result.redirect_url is None
        assert result.failure_reason == "Store is not active"


class TestSSLCommerzInitiation:
    def test_posts_session_form(self, initiation):
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["form"] = {k: v[0] for k, v in parse_qs(request.content.decode()).items()}
            return httpx.Response(
                200,
                json={
                    "status": "SUCCESS",
                    "GatewayPageURL": "https://sandbox.sslcommerz.com/EasyCheckOut/abc",
                    "sessionkey": "abc",
                },
            )

        result = _sslcommerz(handler).initiate(initiation)

        assert result.success is True
        assert result.redirect_url == "https://sandbox.sslcommerz.com/EasyCheckOut/abc"
        assert result.session_key == "abc"
        assert seen["url"] == API_URL
        form = seen["form"]
        assert form["store_id"] == "testbox"
        assert form["total_amount"] == "120.50"
        assert form["tran_id"] == "VV_ord-1_1700000000000"
        assert form["ipn_url"] == "http://testserver/payments/ipn"
        assert form["value_a"] == "ord-1"
        assert form["cus_name"] == "Rahima"

    def test_gateway_refusal(self, initiation):
        def handler(request):
            return httpx.Response(200, json={"status": "FAILED", "failedreason": "Store Credential Error"})

        result = _sslcommerz(handler).initiate(initiation)

        assert result.success is False
        assert result.failure_reason == "Store Credential Error"

    def test_success_without_page_url(self, initiation):
        result = _sslcommerz(lambda request: httpx.Response(200, json={"status": "SUCCESS"})).initiate(initiation)
        assert result.success is False

    def test_http_error(self, initiation):
        result = _sslcommerz(lambda request: httpx.Response(503)).initiate(initiation)
        assert result.success is False

    def test_transport_error(self, initiation):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        result = _sslcommerz(handler).initiate(initiation)

        assert result.success is False
        assert "connection refused" in result.failure_reason

    def test_non_json_response(self, initiation):
        result = _sslcommerz(lambda request: httpx.Response(200, text="<html>")).initiate(initiation)
        assert result.success is False
        assert result.failure_reason == "Malformed gateway response"


class TestSSLCommerzNotificationSignature:
    @staticmethod
    def _signed(payload, store_passwd="qwerty"):
        keys = ["tran_id", "val_id", "amount", "status"]
        fields = {key: payload[key] for key in keys}
        fields["store_passwd"] = hashlib.md5(store_passwd.encode()).hexdigest()
        digest = hashlib.md5("&".join(f"{k}={fields[k]}" for k in sorted(fields)).encode()).hexdigest()
        return {**payload, "verify_key": ",".join(keys), "verify_sign": digest}

    @pytest.fixture()
    def payload(self):
        return {"tran_id": "VV_ord-1_1700000000000", "val_id": "val-9", "amount": "120.50", "status": "VALID"}

    def test_valid_signature(self, payload):
        gateway = _sslcommerz(lambda request: httpx.Response(500))
        assert gateway.verify_notification(self._signed(payload)) is True

    def test_tampered_field(self, payload):
        gateway = _sslcommerz(lambda request: httpx.Response(500))
        signed = self._signed(payload)
        signed["amount"] = "1.00"
        assert gateway.verify_notification(signed) is False

    def test_wrong_store_password(self, payload):
        gateway = _sslcommerz(lambda request: httpx.Response(500))
        assert gateway.verify_notification(self._signed(payload, store_passwd="other")) is False

    def test_unsigned(self, payload):
        gateway = _sslcommerz(lambda request: httpx.Response(500))
        assert gateway.verify_notification(payload) is False


class TestGatewayFactory:
    def test_fake_by_default(self, monkeypatch):
        monkeypatch.setenv("PAYMENT_GATEWAY", "fake")
        reset_gateway()
        assert isinstance(get_gateway(), FakeGateway)

    def test_sslcommerz_from_settings(self, monkeypatch):
        from payments.config import get_payment_settings

        monkeypatch.setenv("PAYMENT_GATEWAY", "SSLCommerz")
        get_payment_settings.cache_clear()
        reset_gateway()

        gateway = get_gateway()

        assert isinstance(gateway, SSLCommerzGateway)
        assert gateway.store_id == "testbox"

    def test_unknown_gateway(self, monkeypatch):
        from payments.config import get_payment_settings

        monkeypatch.setenv("PAYMENT_GATEWAY", "paypal")
        get_payment_settings.cache_clear()
        reset_gateway()

        with pytest.raises(ValueError):
            get_gateway()
