"""Configurable fake payment gateway for development and testing.

This adapter simulates the hosted-checkout flow without any external calls.
It can be configured at runtime to succeed or fail, making it useful for:
- Manual API testing without sandbox credentials
- Automated tests with predictable outcomes
"""

from uuid import uuid4

from payments.gateway.port import InitiationResult, PaymentGateway, PaymentInitiation


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    name = "fake"

    def __init__(self, checkout_url: str = "https://gateway.test/checkout") -> None:
        self.checkout_url = checkout_url
        self.should_succeed: bool = True
        self.failure_reason: str = "Store credential error"
        self.accept_notifications: bool = True
        self.calls: list[PaymentInitiation] = []

    def configure(
        self,
        should_succeed: bool,
        failure_reason: str = "Store credential error",
        accept_notifications: bool = True,
    ) -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.accept_notifications = accept_notifications

    def initiate(self, request: PaymentInitiation) -> InitiationResult:
        self.calls.append(request)

        if self.should_succeed:
            session_key = uuid4().hex
            return InitiationResult(
                success=True,
                redirect_url=f"{self.checkout_url}/{session_key}",
                session_key=session_key,
                gateway_status="SUCCESS",
            )
        return InitiationResult(
            success=False,
            gateway_status="FAILED",
            failure_reason=self.failure_reason,
        )

    def verify_notification(self, payload: dict[str, str]) -> bool:  # noqa: ARG002
        return self.accept_notifications
