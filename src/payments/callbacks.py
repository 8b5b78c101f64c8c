"""Interpretation of SSLCommerz callback parameters.

The processor reports an outcome twice: through the buyer's browser
(success/fail/cancel redirect) and server-to-server (IPN). Both are reduced
here to one of the terminal payment outcomes, or ``None`` when the callback
carries no usable outcome.
"""

from enum import Enum

PAID = "paid"
FAILED = "failed"
CANCELLED = "cancelled"

_VALID_STATUSES = {"VALID", "VALIDATED"}
_CANCELLED_STATUSES = {"CANCELLED"}

# Stored payment status -> ``?payment=`` value on the buyer redirect
_REDIRECT_OUTCOMES = {
    PAID: "success",
    FAILED: "fail",
    CANCELLED: "cancel",
}


class CallbackChannel(Enum):
    SUCCESS = "success"
    FAIL = "fail"
    CANCEL = "cancel"
    IPN = "ipn"


def interpret_redirect(channel: CallbackChannel, status: str | None, error: str | None = None) -> str | None:
    """Classify a browser redirect.

    A status always wins over the path it arrived on. Without a status the
    path decides: a processor error or the fail path means failed, cancel
    means cancelled, and a success path with nothing to go on changes
    nothing.
    """
    status = (status or "").strip().upper()

    if status:
        if status in _VALID_STATUSES:
            return PAID
        if status in _CANCELLED_STATUSES:
            return CANCELLED
        return FAILED

    if error:
        return FAILED
    if channel == CallbackChannel.CANCEL:
        return CANCELLED
    if channel == CallbackChannel.FAIL:
        return FAILED
    return None


def interpret_notification(status: str | None) -> str | None:
    """Only a VALID notification moves an order; anything else is acknowledged as-is."""
    if (status or "").strip().upper() == "VALID":
        return PAID
    return None


def redirect_outcome(payment_status: str | None) -> str:
    return _REDIRECT_OUTCOMES.get(payment_status or "", "error")
