"""Tests for merging payment outcomes into an Order."""

import pytest
from ordering.order.events import PaymentReconciled
from ordering.order.order import Order, PaymentStatus
from protean.exceptions import ValidationError
from shared.exceptions import ReconciliationConflictError


def _make_order():
    order = Order.create(
        order_id="ord-pay-001",
        buyer_id="buyer-001",
        seller_id="seller-001",
        items_data=[{"product_id": "prod-1", "quantity": 1, "unit_price": 250.0}],
        delivery={"address": "Farm Lane", "phone": "017"},
    )
    order._events.clear()
    return order


class TestSettlingFromPending:
    @pytest.mark.parametrize("outcome", ["paid", "failed", "cancelled"])
    def test_pending_settles_to_outcome(self, outcome):
        order = _make_order()
        assert order.reconcile_payment(outcome, transaction_id="VV_ord-pay-001_1", channel="ipn") is True
        assert order.payment_status == outcome
        assert order.payment_channel == "ipn"
        assert order.payment_settled_at is not None

    def test_paid_records_transaction_id(self):
        order = _make_order()
        order.reconcile_payment("paid", transaction_id="VV_ord-pay-001_1")
        assert order.transaction_id == "VV_ord-pay-001_1"

    def test_failure_does_not_record_transaction_id(self):
        order = _make_order()
        order.reconcile_payment("failed", transaction_id="VV_ord-pay-001_1")
        assert order.transaction_id is None

    def test_raises_payment_reconciled(self):
        order = _make_order()
        order.reconcile_payment("paid", transaction_id="VV_ord-pay-001_1", channel="redirect")
        assert len(order._events) == 1
        event = order._events[0]
        assert isinstance(event, PaymentReconciled)
        assert event.payment_status == "paid"
        assert event.channel == "redirect"

    def test_fulfillment_status_untouched(self):
        order = _make_order()
        order.reconcile_payment("paid")
        assert order.status == "pending"


class TestIdempotence:
    def test_same_outcome_twice_is_noop(self):
        order = _make_order()
        order.reconcile_payment("paid", transaction_id="VV_ord-pay-001_1")
        order._events.clear()

        assert order.reconcile_payment("paid", transaction_id="VV_ord-pay-001_2") is False
        assert order.transaction_id == "VV_ord-pay-001_1"
        assert order._events == []


class TestConflicts:
    @pytest.mark.parametrize("later", ["failed", "cancelled"])
    def test_paid_is_never_overwritten(self, later):
        order = _make_order()
        order.reconcile_payment("paid", transaction_id="VV_ord-pay-001_1")

        with pytest.raises(ReconciliationConflictError) as exc:
            order.reconcile_payment(later)

        assert exc.value.current == "paid"
        assert exc.value.attempted == later
        assert order.payment_status == PaymentStatus.PAID.value

    def test_cancelled_then_paid_conflicts(self):
        order = _make_order()
        order.reconcile_payment("cancelled")
        with pytest.raises(ReconciliationConflictError):
            order.reconcile_payment("paid", transaction_id="VV_ord-pay-001_1")
        assert order.transaction_id is None


class TestInvalidOutcome:
    def test_pending_is_not_an_outcome(self):
        order = _make_order()
        with pytest.raises(ValidationError):
            order.reconcile_payment("pending")

    def test_unknown_outcome(self):
        order = _make_order()
        with pytest.raises(ValueError):
            order.reconcile_payment("refunded")
