"""Shared BDD fixtures and step definitions for the Ordering domain."""

import json
from uuid import uuid4

import pytest
from ordering.order.creation import PlaceOrder
from ordering.order.order import Order
from ordering.payment.reconciliation import apply_payment_outcome
from protean import current_domain
from pytest_bdd import given, parsers, then, when


@pytest.fixture()
def order_id():
    return str(uuid4())


@pytest.fixture()
def reports():
    """Reconciliation results in arrival order."""
    return []


# ---------------------------------------------------------------------------
# Given
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a pending order from buyer "{buyer_id}" to seller "{seller_id}"'))
def _(order_id, buyer_id, seller_id):
    current_domain.process(
        PlaceOrder(
            order_id=order_id,
            checkout_id=str(uuid4()),
            buyer_id=buyer_id,
            seller_id=seller_id,
            items=json.dumps([{"product_id": "tomato", "quantity": 2, "unit_price": 60.0}]),
            delivery_address="House 7, Road 3, Dhaka",
            delivery_phone="01711111111",
        ),
        asynchronous=False,
    )


# ---------------------------------------------------------------------------
# When
# ---------------------------------------------------------------------------
@when(parsers.cfparse('the "{channel}" reports "{outcome}" with transaction "{tran_id}"'))
def _(order_id, reports, channel, outcome, tran_id):
    reports.append(apply_payment_outcome(order_id, outcome, tran_id, channel=channel))


# ---------------------------------------------------------------------------
# Then
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the payment status is "{payment_status}"'))
def _(order_id, payment_status):
    assert current_domain.repository_for(Order).get(order_id).payment_status == payment_status


@then(parsers.cfparse('the stored transaction is "{tran_id}"'))
def _(order_id, tran_id):
    assert current_domain.repository_for(Order).get(order_id).transaction_id == tran_id


@then("no transaction is stored")
def _(order_id):
    assert current_domain.repository_for(Order).get(order_id).transaction_id is None


@then(parsers.cfparse("{count:d} settlement was recorded"))
def _(reports, count):
    assert sum(1 for r in reports if r.changed) == count


@then("the last report was a conflict")
def _(reports):
    assert reports[-1].conflict is True
