"""Payment gateway factory.

Provides get_gateway() / set_gateway() to swap implementations:
- FakeGateway for development and testing
- SSLCommerzGateway when PAYMENT_GATEWAY=sslcommerz
"""

from payments.config import get_payment_settings
from payments.gateway.fake_adapter import FakeGateway
from payments.gateway.port import PaymentGateway
from payments.gateway.sslcommerz_adapter import SSLCommerzGateway

_current_gateway: PaymentGateway | None = None


def _build_gateway() -> PaymentGateway:
    settings = get_payment_settings()
    if settings.PAYMENT_GATEWAY == "sslcommerz":
        return SSLCommerzGateway(
            store_id=settings.STORE_ID,
            store_passwd=settings.STORE_PASSWD.get_secret_value(),
            api_url=settings.SSLCOMMERZ_API_URL,
            timeout=settings.GATEWAY_TIMEOUT,
        )
    if settings.PAYMENT_GATEWAY == "fake":
        return FakeGateway()
    raise ValueError(f"Unknown payment gateway: {settings.PAYMENT_GATEWAY}")


def get_gateway() -> PaymentGateway:
    """Return the current payment gateway, built from settings on first use."""
    global _current_gateway
    if _current_gateway is None:
        _current_gateway = _build_gateway()
    return _current_gateway


def set_gateway(gateway: PaymentGateway) -> None:
    """Override the active payment gateway (useful for tests)."""
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    """Reset to default gateway."""
    global _current_gateway
    _current_gateway = None
