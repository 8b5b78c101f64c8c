"""Payment gateway port (abstract interface).

Defines the contract that all payment gateway adapters must implement.
This enables swapping between FakeGateway (dev/test) and SSLCommerzGateway
(sandbox/production) without changing any domain or application code.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class CustomerDetails:
    name: str
    email: str
    address: str
    phone: str
    city: str
    country: str


@dataclass(frozen=True)
class PaymentInitiation:
    """Everything the processor needs to open a hosted payment session."""

    tran_id: str
    order_id: str
    amount: float
    currency: str
    product_name: str
    product_category: str
    success_url: str
    fail_url: str
    cancel_url: str
    ipn_url: str
    customer: CustomerDetails


@dataclass(frozen=True)
class InitiationResult:
    """Result of a payment session request."""

    success: bool
    redirect_url: str | None = None
    session_key: str | None = None
    gateway_status: str | None = None
    failure_reason: str | None = None


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    name: str = "abstract"

    @abstractmethod
    def initiate(self, request: PaymentInitiation) -> InitiationResult:
        """Open a hosted payment session and return where to send the buyer."""
        ...

    @abstractmethod
    def verify_notification(self, payload: dict[str, str]) -> bool:
        """Verify that a server-to-server notification is authentically from the gateway."""
        ...
