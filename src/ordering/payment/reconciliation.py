"""Payment reconciliation — apply a processor-reported outcome to an order.

The browser redirect and the IPN may arrive in any order, any number of
times, and concurrently. Both funnel through ``apply_payment_outcome``:

- the Order aggregate merges the outcome (idempotent, first settlement wins);
- concurrent writers are serialized by the repository's version check, and
  the loser re-reads and merges again;
- a contradicting outcome is logged and reported as the stored state.
"""

from dataclasses import dataclass

import structlog
from protean import handle
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order, PaymentStatus
from ordering.payment.transaction import PaymentTransaction
from payments.transaction_ids import parse_order_id
from shared.exceptions import MissingOrderIdentifierError, ReconciliationConflictError

logger = structlog.get_logger(__name__)

MAX_RECONCILE_ATTEMPTS = 3


@ordering.command(part_of="Order")
class ReconcilePayment:
    order_id = Identifier(required=True)
    outcome = String(required=True, choices=PaymentStatus)
    transaction_id = String(max_length=255)
    channel = String(max_length=20)


@ordering.command_handler(part_of=Order)
class ReconcilePaymentHandler:
    @handle(ReconcilePayment)
    def reconcile_payment(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        changed = order.reconcile_payment(
            command.outcome,
            transaction_id=command.transaction_id,
            channel=command.channel,
        )
        if changed:
            repo.add(order)
        return {"payment_status": order.payment_status, "changed": changed}


@dataclass(frozen=True)
class ReconciliationResult:
    order_id: str
    payment_status: str
    changed: bool = False
    conflict: bool = False


def resolve_order_id(routed_order_id: str | None, tran_id: str | None) -> str:
    """Find the order a callback refers to.

    Prefers the id in the callback URL, then the stored transaction record,
    then the id embedded in the transaction id. A transaction that belongs
    to a different order than the URL names is treated as unidentifiable.
    """
    recorded_order_id = None
    if tran_id:
        try:
            recorded_order_id = str(current_domain.repository_for(PaymentTransaction).get(tran_id).order_id)
        except ObjectNotFoundError:
            recorded_order_id = None

    if routed_order_id:
        if recorded_order_id and recorded_order_id != str(routed_order_id):
            logger.warning(
                "Callback order does not match its transaction",
                order_id=str(routed_order_id),
                tran_id=tran_id,
                recorded_order_id=recorded_order_id,
            )
            raise MissingOrderIdentifierError("Callback order does not match its transaction")
        return str(routed_order_id)

    order_id = recorded_order_id or parse_order_id(tran_id)
    if not order_id:
        raise MissingOrderIdentifierError()
    return order_id


def apply_payment_outcome(order_id: str, outcome: str, transaction_id: str | None, channel: str) -> ReconciliationResult:
    """Merge ``outcome`` into the order and return the stored payment state.

    Raises ObjectNotFoundError for an unknown order; storage errors propagate.
    """
    command = ReconcilePayment(
        order_id=order_id,
        outcome=outcome,
        transaction_id=transaction_id,
        channel=channel,
    )

    attempt = 1
    while True:
        try:
            result = current_domain.process(command, asynchronous=False)
        except ReconciliationConflictError as exc:
            logger.warning(
                "Conflicting payment outcome ignored",
                order_id=order_id,
                stored=exc.current,
                attempted=exc.attempted,
                channel=channel,
                tran_id=transaction_id,
            )
            return ReconciliationResult(order_id=order_id, payment_status=exc.current, conflict=True)
        except ExpectedVersionError:
            if attempt >= MAX_RECONCILE_ATTEMPTS:
                raise
            logger.info(
                "Concurrent payment update, retrying",
                order_id=order_id,
                attempt=attempt,
                channel=channel,
            )
            attempt += 1
            continue

        if result["changed"]:
            logger.info(
                "Payment reconciled",
                order_id=order_id,
                payment_status=result["payment_status"],
                channel=channel,
                tran_id=transaction_id,
            )
        return ReconciliationResult(
            order_id=order_id,
            payment_status=result["payment_status"],
            changed=result["changed"],
        )
