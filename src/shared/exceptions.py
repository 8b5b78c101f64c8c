"""Application error taxonomy.

Every error carries the HTTP status the API answers with. Protean's own
``ValidationError`` and ``ObjectNotFoundError`` stay in use for field-level
and lookup failures; these cover the marketplace-specific failure modes.
"""


class MarketplaceError(Exception):
    """Base class for all marketplace errors."""

    def __init__(self, message: str, status_code: int = 400) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class EmptyCartError(MarketplaceError):
    def __init__(self, message: str = "Cart has no orderable items") -> None:
        super().__init__(message, 422)


class GatewayInitError(MarketplaceError):
    """The payment processor refused or failed to open a payment session."""

    def __init__(self, order_id: str, reason: str | None = None) -> None:
        self.order_id = order_id
        self.reason = reason
        super().__init__(f"Payment could not be initiated for order {order_id}", 502)


class UnauthorizedOrderAccessError(MarketplaceError):
    def __init__(self, order_id: str, actor_id: str, role: str = "party") -> None:
        self.order_id = order_id
        self.actor_id = actor_id
        self.role = role
        super().__init__(f"User is not the {role} of order {order_id}", 403)


class ReconciliationConflictError(MarketplaceError):
    """A payment outcome contradicts the terminal outcome already stored.

    Raised by the Order aggregate and absorbed by the reconciler; callers
    only ever see the stored state.
    """

    def __init__(self, order_id: str, current: str, attempted: str) -> None:
        self.order_id = order_id
        self.current = current
        self.attempted = attempted
        super().__init__(
            f"Order {order_id} payment is already {current}; ignoring {attempted}",
            409,
        )


class MissingOrderIdentifierError(MarketplaceError):
    def __init__(self, message: str = "Payment callback does not identify an order") -> None:
        super().__init__(message, 400)


class CheckoutIncompleteError(MarketplaceError):
    """Some seller orders of a checkout were created, others failed.

    The cart is left intact; retrying the checkout creates only the missing
    orders.
    """

    def __init__(self, created_order_ids: list[str], failed_seller_ids: list[str]) -> None:
        self.created_order_ids = list(created_order_ids)
        self.failed_seller_ids = list(failed_seller_ids)
        super().__init__(
            f"Checkout incomplete: {len(self.failed_seller_ids)} seller order(s) could not be created",
            503,
        )
