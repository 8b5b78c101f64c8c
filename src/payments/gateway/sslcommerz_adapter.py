"""SSLCommerz hosted-checkout adapter.

Opens a payment session with a form-encoded POST to the session API and
returns the ``GatewayPageURL`` the buyer is redirected to. Notifications are
verified with SSLCommerz's ``verify_sign`` scheme: an MD5 over the fields
named in ``verify_key`` plus the MD5 of the store password, sorted by key.
"""

import hashlib

import httpx
import structlog

from payments.gateway.port import InitiationResult, PaymentGateway, PaymentInitiation

logger = structlog.get_logger(__name__)


class SSLCommerzGateway(PaymentGateway):
    name = "sslcommerz"

    def __init__(
        self,
        store_id: str,
        store_passwd: str,
        api_url: str,
        timeout: float = 15.0,
        client: httpx.Client | None = None,
    ) -> None:
        self.store_id = store_id
        self.store_passwd = store_passwd
        self.api_url = api_url
        self._client = client or httpx.Client(timeout=httpx.Timeout(timeout))

    def _session_form(self, request: PaymentInitiation) -> dict[str, str]:
        customer = request.customer
        return {
            "store_id": self.store_id,
            "store_passwd": self.store_passwd,
            "total_amount": f"{request.amount:.2f}",
            "currency": request.currency,
            "tran_id": request.tran_id,
            "success_url": request.success_url,
            "fail_url": request.fail_url,
            "cancel_url": request.cancel_url,
            "ipn_url": request.ipn_url,
            "shipping_method": "NO",
            "product_name": request.product_name,
            "product_category": request.product_category,
            "product_profile": "general",
            "cus_name": customer.name,
            "cus_email": customer.email,
            "cus_add1": customer.address,
            "cus_city": customer.city,
            "cus_country": customer.country,
            "cus_phone": customer.phone,
            "value_a": request.order_id,
        }

    def initiate(self, request: PaymentInitiation) -> InitiationResult:
        try:
            response = self._client.post(self.api_url, data=self._session_form(request))
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPError as exc:
            logger.warning(
                "SSLCommerz session request failed",
                tran_id=request.tran_id,
                error=str(exc),
            )
            return InitiationResult(success=False, failure_reason=str(exc))
        except ValueError:
            logger.warning("SSLCommerz returned a non-JSON response", tran_id=request.tran_id)
            return InitiationResult(success=False, failure_reason="Malformed gateway response")

        status = body.get("status")
        redirect_url = body.get("GatewayPageURL")
        if status == "SUCCESS" and redirect_url:
            return InitiationResult(
                success=True,
                redirect_url=redirect_url,
                session_key=body.get("sessionkey"),
                gateway_status=status,
            )

        return InitiationResult(
            success=False,
            gateway_status=status,
            failure_reason=body.get("failedreason") or "Gateway did not return a payment page",
        )

    def verify_notification(self, payload: dict[str, str]) -> bool:
        verify_sign = payload.get("verify_sign")
        verify_key = payload.get("verify_key")
        if not verify_sign or not verify_key:
            return False

        signed = {key: payload.get(key, "") for key in verify_key.split(",") if key}
        signed["store_passwd"] = hashlib.md5(self.store_passwd.encode()).hexdigest()  # noqa: S324
        hash_string = "&".join(f"{key}={signed[key]}" for key in sorted(signed))

        return hashlib.md5(hash_string.encode()).hexdigest() == verify_sign  # noqa: S324
