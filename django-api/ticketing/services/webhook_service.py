"""Payment provider callback handling.

The provider delivers callbacks at least once and in no particular order.
Every authenticated, well-formed callback is acknowledged, whatever its
business outcome, so nothing here raises to the caller: malformed IDs,
unknown statuses and unknown orders are logged and ignored, and issuance
failures are logged for a later retry (``issue_pending_tickets``).
"""

import hmac
import logging

from ticketing.domain import (
    OrderId,
    PaymentNotification,
    PaymentStatus,
    ReconcileOutcome,
    WebhookOutcome,
)
from ticketing.domain.errors import DomainError
from ticketing.services.issuance_service import TicketIssuanceService
from ticketing.services.notifier import Notifier
from ticketing.services.payment_reconciler import PaymentReconciler

logger = logging.getLogger(__name__)


def is_valid_callback_token(received: str | None, expected: str) -> bool:
    """Exact match against the shared secret. An unset secret matches nothing."""
    if not expected or received is None:
        return False
    return hmac.compare_digest(received.encode(), expected.encode())


class PaymentWebhookService:
    """Drives reconciliation, issuance and notification for one callback."""

    def __init__(
        self,
        reconciler: PaymentReconciler,
        issuance: TicketIssuanceService,
        notifier: Notifier,
    ) -> None:
        self._reconciler = reconciler
        self._issuance = issuance
        self._notifier = notifier

    def handle(self, notification: PaymentNotification) -> WebhookOutcome:
        try:
            order_id = OrderId.from_string(notification.external_id)
        except (TypeError, ValueError, AttributeError):
            logger.warning("Webhook ignored: invalid UUID for order ID %r", notification.external_id)
            return WebhookOutcome.IGNORED_MALFORMED_ID

        status = PaymentStatus.from_provider(notification.status)
        if status is None:
            logger.info(
                "Received unhandled status %r for order %s", notification.status, order_id
            )
            return WebhookOutcome.IGNORED_UNKNOWN_STATUS

        result = self._reconciler.reconcile(order_id, status, notification.invoice_id or None)
        if result.outcome is ReconcileOutcome.NOT_FOUND:
            return WebhookOutcome.ORDER_NOT_FOUND

        order = result.order
        if result.outcome is ReconcileOutcome.UPDATED and status is PaymentStatus.EXPIRED:
            self._send_expiry(order, was_paid=result.previous_status is PaymentStatus.PAID)

        if status is not PaymentStatus.PAID or not order.is_paid:
            return WebhookOutcome.RECONCILED

        logger.info(
            "Payment for order %s via %s at %s; issuing tickets",
            order_id,
            notification.payment_method,
            notification.paid_at,
        )
        try:
            self._issuance.issue_tickets(order)
        except DomainError:
            logger.exception("Ticket issuance failed for order %s", order_id)
            return WebhookOutcome.ISSUANCE_FAILED
        return WebhookOutcome.TICKETS_ISSUED

    def _send_expiry(self, order, was_paid: bool) -> None:
        try:
            self._notifier.send_order_expired(order, was_paid=was_paid)
        except Exception:
            logger.exception("Expiry notification failed for order %s", order.id)
