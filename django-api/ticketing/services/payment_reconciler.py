"""Applies provider payment status changes to orders.

Permitted transitions::

    PENDING -> PAID
    PENDING -> EXPIRED
    PAID    -> EXPIRED   (refund / chargeback)

Re-applying the current status is a no-op. Anything else (EXPIRED -> PAID,
any move back to PENDING) is rejected and logged; the order is untouched.
"""

import logging

from ticketing.domain import (
    OrderId,
    OrderPaymentPatch,
    PaymentStatus,
    ReconcileOutcome,
    ReconcileResult,
)
from ticketing.stores.interfaces import OrderStore

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: dict[PaymentStatus, frozenset[PaymentStatus]] = {
    PaymentStatus.PENDING: frozenset({PaymentStatus.PAID, PaymentStatus.EXPIRED}),
    PaymentStatus.PAID: frozenset({PaymentStatus.EXPIRED}),
    PaymentStatus.EXPIRED: frozenset(),
}

# Bounds retries when a concurrent delivery moves the order between read and write.
MAX_ATTEMPTS = 3


def is_transition_allowed(current: PaymentStatus, new: PaymentStatus) -> bool:
    return new in ALLOWED_TRANSITIONS[current]


class PaymentReconciler:
    """State machine over Order.payment_status."""

    def __init__(self, orders: OrderStore) -> None:
        self._orders = orders

    def reconcile(
        self, order_id: OrderId, status: PaymentStatus, payment_ref: str | None = None
    ) -> ReconcileResult:
        for _ in range(MAX_ATTEMPTS):
            order = self._orders.get_order(order_id)
            if order is None:
                logger.warning("Order %s not found; ignoring status %s", order_id, status.value)
                return ReconcileResult(ReconcileOutcome.NOT_FOUND)

            current = order.payment_status
            if current is status:
                logger.info("Order %s is already %s; skipping update", order_id, status.value)
                return ReconcileResult(ReconcileOutcome.UNCHANGED, order)

            if not is_transition_allowed(current, status):
                logger.warning(
                    "Rejected status change %s -> %s for order %s",
                    current.value,
                    status.value,
                    order_id,
                )
                return ReconcileResult(ReconcileOutcome.REJECTED, order)

            patch = OrderPaymentPatch(payment_status=status, payment_ref=payment_ref)
            if self._orders.apply_payment_patch(order_id, patch, expected_status=current):
                if current is PaymentStatus.PAID:
                    logger.warning("Paid order %s moved to %s", order_id, status.value)
                logger.info(
                    "Order %s status updated to %s. Payment ref: %s",
                    order_id,
                    status.value,
                    payment_ref,
                )
                return ReconcileResult(
                    ReconcileOutcome.UPDATED, self._orders.get_order(order_id), previous_status=current
                )

            logger.info("Order %s changed concurrently; re-reading", order_id)

        order = self._orders.get_order(order_id)
        return ReconcileResult(ReconcileOutcome.UNCHANGED, order)
