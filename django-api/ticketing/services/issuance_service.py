"""Ticket issuance for paid orders.

Issuance is idempotent per order: if the order already has tickets they
are returned unchanged. Otherwise ``quantity`` tickets are built, their
QR and PDF files written, and the whole batch persisted in one
transaction. A failure anywhere aborts the batch and removes the files
written by the attempt, so a later retry starts clean.
"""

import logging
from collections.abc import Callable

from django.db import DatabaseError
from django.utils import timezone

from ticketing.artifacts import TicketArtifactGenerator
from ticketing.domain import IssuanceResult, Order, Ticket, TicketCode, TicketId
from ticketing.domain.errors import (
    ArtifactGenerationError,
    IncompleteOrderError,
    OrderNotPaidError,
    TicketBatchConflictError,
    TicketIssuanceError,
)
from ticketing.services.notifier import Notifier
from ticketing.stores.interfaces import TicketStore

logger = logging.getLogger(__name__)


class TicketIssuanceService:
    """Creates exactly one ticket batch per paid order."""

    def __init__(
        self,
        tickets: TicketStore,
        artifacts: TicketArtifactGenerator,
        notifier: Notifier,
        code_factory: Callable[[], TicketCode] = TicketCode.generate,
    ) -> None:
        self._tickets = tickets
        self._artifacts = artifacts
        self._notifier = notifier
        self._code_factory = code_factory

    def issue_tickets(self, order: Order) -> IssuanceResult:
        """Return the order's tickets, creating them if none exist.

        Raises:
            IncompleteOrderError: If buyer or event is not resolved.
            OrderNotPaidError: If the order is not PAID.
            ArtifactGenerationError: If any QR or PDF could not be written.
            TicketIssuanceError: If the batch could not be persisted.
        """
        if order.buyer is None or order.event is None:
            logger.error("Order %s is missing buyer or event", order.id)
            raise IncompleteOrderError()
        if not order.is_paid:
            raise OrderNotPaidError()

        existing = self._tickets.list_tickets_for_order(order.id)
        if existing:
            logger.info("Tickets already exist for order %s", order.id)
            return IssuanceResult(tickets=tuple(existing), created=False)

        drafts = self._build_batch(order)
        try:
            saved = self._tickets.save_ticket_batch(order.id, drafts)
        except TicketBatchConflictError:
            self._discard(drafts)
            logger.info("Concurrent issuance won for order %s; returning its tickets", order.id)
            return IssuanceResult(tickets=tuple(self._tickets.list_tickets_for_order(order.id)), created=False)
        except DatabaseError as exc:
            self._discard(drafts)
            logger.error("Failed to persist tickets for order %s: %s", order.id, exc)
            raise TicketIssuanceError() from exc

        logger.info("Created %d tickets for order %s", len(saved), order.id)
        self._notify(order, saved)
        return IssuanceResult(tickets=tuple(saved), created=True)

    def _build_batch(self, order: Order) -> list[Ticket]:
        drafts: list[Ticket] = []
        issued_at = timezone.now()
        try:
            for position in range(1, order.quantity.value + 1):
                code = self._code_factory()
                artifacts = self._artifacts.generate(code, order.event, order.buyer)
                drafts.append(
                    Ticket(
                        id=TicketId.generate(),
                        order_id=order.id,
                        event_id=order.event.id,
                        position=position,
                        code=code,
                        qr_file=artifacts.qr_file,
                        pdf_file=artifacts.pdf_file,
                        issued_at=issued_at,
                    )
                )
        except ArtifactGenerationError:
            logger.error("Artifact generation failed for order %s; aborting batch", order.id)
            self._discard(drafts)
            raise
        return drafts

    def _discard(self, drafts: list[Ticket]) -> None:
        for ticket in drafts:
            self._artifacts.discard(ticket.code)

    def _notify(self, order: Order, tickets: list[Ticket]) -> None:
        try:
            self._notifier.send_ticket_delivery(order, tickets)
            self._notifier.schedule_event_reminder(order.buyer, order.event)
        except Exception:
            logger.exception("Ticket notification failed for order %s", order.id)
