"""Tests for the payment status state machine.

Run with: pytest tests/test_reconciler.py -v
"""

from unittest.mock import Mock

import pytest

from ticketing import models
from ticketing.domain import OrderId, PaymentStatus, ReconcileOutcome
from ticketing.services import PaymentReconciler
from ticketing.services.payment_reconciler import MAX_ATTEMPTS, is_transition_allowed
from ticketing.stores import DjangoOrderStore
from ticketing.stores.interfaces import OrderStore


class TestTransitions:
    @pytest.mark.parametrize(
        "current,new",
        [
            (PaymentStatus.PENDING, PaymentStatus.PAID),
            (PaymentStatus.PENDING, PaymentStatus.EXPIRED),
            (PaymentStatus.PAID, PaymentStatus.EXPIRED),
        ],
    )
    def test_allowed(self, current, new):
        assert is_transition_allowed(current, new)

    @pytest.mark.parametrize(
        "current,new",
        [
            (PaymentStatus.EXPIRED, PaymentStatus.PAID),
            (PaymentStatus.EXPIRED, PaymentStatus.PENDING),
            (PaymentStatus.PAID, PaymentStatus.PENDING),
        ],
    )
    def test_rejected(self, current, new):
        assert not is_transition_allowed(current, new)


@pytest.mark.django_db
class TestReconcile:
    """Tests for PaymentReconciler against the ORM store."""

    @pytest.fixture
    def reconciler(self):
        return PaymentReconciler(DjangoOrderStore())

    def test_pending_to_paid_records_payment_ref(self, reconciler, pending_order):
        """Given a PENDING order, PAID updates status and payment ref."""
        result = reconciler.reconcile(OrderId(pending_order.id), PaymentStatus.PAID, "inv-paid")

        assert result.outcome is ReconcileOutcome.UPDATED
        assert result.order.is_paid
        assert result.previous_status is PaymentStatus.PENDING
        pending_order.refresh_from_db()
        assert pending_order.payment_status == models.Order.PaymentStatus.PAID
        assert pending_order.payment_ref == "inv-paid"

    def test_missing_ref_keeps_existing_one(self, reconciler, pending_order):
        reconciler.reconcile(OrderId(pending_order.id), PaymentStatus.PAID, None)

        pending_order.refresh_from_db()
        assert pending_order.payment_ref == "inv-existing"

    def test_same_status_is_unchanged(self, reconciler, paid_order):
        """Re-delivery of the current status touches nothing."""
        before = paid_order.updated_at

        result = reconciler.reconcile(OrderId(paid_order.id), PaymentStatus.PAID, "inv-other")

        assert result.outcome is ReconcileOutcome.UNCHANGED
        paid_order.refresh_from_db()
        assert paid_order.updated_at == before
        assert paid_order.payment_ref == "inv-existing"

    def test_expired_to_paid_is_rejected(self, reconciler, order_factory):
        """A late PAID after EXPIRED leaves the order EXPIRED."""
        order = order_factory(payment_status=models.Order.PaymentStatus.EXPIRED)

        result = reconciler.reconcile(OrderId(order.id), PaymentStatus.PAID, "inv-late")

        assert result.outcome is ReconcileOutcome.REJECTED
        order.refresh_from_db()
        assert order.payment_status == models.Order.PaymentStatus.EXPIRED

    def test_paid_to_expired_is_applied(self, reconciler, paid_order):
        result = reconciler.reconcile(OrderId(paid_order.id), PaymentStatus.EXPIRED)

        assert result.outcome is ReconcileOutcome.UPDATED
        assert result.previous_status is PaymentStatus.PAID
        paid_order.refresh_from_db()
        assert paid_order.payment_status == models.Order.PaymentStatus.EXPIRED

    def test_unknown_order_is_not_found(self, reconciler):
        result = reconciler.reconcile(OrderId.generate(), PaymentStatus.PAID)
        assert result.outcome is ReconcileOutcome.NOT_FOUND
        assert result.order is None


class TestReconcileRetries:
    def test_lost_compare_and_set_is_retried_then_gives_up(self):
        """A write that keeps losing the race is bounded and reported unchanged."""
        order = Mock(payment_status=PaymentStatus.PENDING)
        store = Mock(spec=OrderStore)
        store.get_order.return_value = order
        store.apply_payment_patch.return_value = False

        result = PaymentReconciler(store).reconcile(OrderId.generate(), PaymentStatus.PAID)

        assert result.outcome is ReconcileOutcome.UNCHANGED
        assert store.apply_payment_patch.call_count == MAX_ATTEMPTS

    def test_rereads_after_concurrent_change(self):
        """If another delivery already applied PAID, the retry sees it and stops."""
        store = Mock(spec=OrderStore)
        store.get_order.side_effect = [
            Mock(payment_status=PaymentStatus.PENDING),
            Mock(payment_status=PaymentStatus.PAID),
        ]
        store.apply_payment_patch.return_value = False

        result = PaymentReconciler(store).reconcile(OrderId.generate(), PaymentStatus.PAID)

        assert result.outcome is ReconcileOutcome.UNCHANGED
        assert store.apply_payment_patch.call_count == 1
