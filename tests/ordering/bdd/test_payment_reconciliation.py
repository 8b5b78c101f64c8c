"""BDD tests for payment reconciliation."""

from ordering.order.fulfillment import AdvanceOrderStatus
from ordering.order.order import Order
from protean import current_domain
from pytest_bdd import parsers, scenarios, then, when

scenarios("features/payment_reconciliation.feature")


@when(parsers.cfparse('the seller "{seller_id}" advances the order to "{status}"'))
def _(order_id, seller_id, status):
    current_domain.process(
        AdvanceOrderStatus(order_id=order_id, seller_id=seller_id, next_status=status),
        asynchronous=False,
    )


@then(parsers.cfparse('the order status is "{status}"'))
def _(order_id, status):
    assert current_domain.repository_for(Order).get(order_id).status == status
