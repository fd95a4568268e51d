"""Ticket queries, checks, redemption and artifact retrieval."""

import logging
from pathlib import Path

from django.utils import timezone

from ticketing.artifacts import TicketArtifactGenerator
from ticketing.domain import (
    Attendee,
    PaymentStatus,
    Ticket,
    TicketCheckResult,
    TicketCheckStatus,
    TicketCode,
)
from ticketing.domain.errors import TicketNotFoundError
from ticketing.services.order_service import OrderService
from ticketing.stores.interfaces import TicketStore

logger = logging.getLogger(__name__)


def _parse_code(code: str) -> TicketCode | None:
    try:
        return TicketCode(code.strip().upper())
    except (AttributeError, ValueError):
        return None


class TicketService:
    """Read access to tickets plus the used-flag transition."""

    def __init__(
        self, tickets: TicketStore, orders: OrderService, artifacts: TicketArtifactGenerator
    ) -> None:
        self._tickets = tickets
        self._orders = orders
        self._artifacts = artifacts

    def list_tickets(self, buyer: Attendee) -> list[Ticket]:
        return self._tickets.list_tickets_for_buyer(buyer.id)

    def list_tickets_for_order(self, buyer: Attendee, order_id: str) -> list[Ticket]:
        """Raises InvalidOrderIdError / OrderNotFoundError like OrderService.get_order."""
        order = self._orders.get_order(buyer, order_id)
        return self._tickets.list_tickets_for_order(order.id)

    def check_ticket(self, code: str, user_id: int, is_staff: bool = False) -> TicketCheckResult:
        """Report whether a ticket can be used, without using it.

        A ticket whose order is no longer PAID (payment reversed) is
        INVALID_STATE even though the ticket row still exists.
        """
        ticket = self._find(code)
        if ticket is None:
            return TicketCheckResult(TicketCheckStatus.NOT_FOUND)
        if not is_staff and self._tickets.get_ticket_owner_id(ticket.code) != user_id:
            return TicketCheckResult(TicketCheckStatus.NOT_OWNED)
        if self._tickets.get_ticket_order_status(ticket.code) is not PaymentStatus.PAID:
            return TicketCheckResult(TicketCheckStatus.INVALID_STATE, ticket)
        if ticket.is_used:
            return TicketCheckResult(TicketCheckStatus.ALREADY_USED, ticket)
        return TicketCheckResult(TicketCheckStatus.VALID, ticket)

    def redeem_ticket(self, code: str) -> TicketCheckResult:
        """Mark a ticket used. Succeeds at most once per ticket, only for PAID orders."""
        ticket = self._find(code)
        if ticket is None:
            return TicketCheckResult(TicketCheckStatus.NOT_FOUND)
        if self._tickets.mark_used(ticket.code, timezone.now()):
            logger.info("Ticket %s marked as used", ticket.code)
            return TicketCheckResult(TicketCheckStatus.VALID, self._tickets.get_ticket_by_code(ticket.code))

        current = self._tickets.get_ticket_by_code(ticket.code)
        if current.is_used:
            logger.info("Ticket %s is already used", ticket.code)
            return TicketCheckResult(TicketCheckStatus.ALREADY_USED, current)
        logger.warning("Ticket %s refused: order is not paid", ticket.code)
        return TicketCheckResult(TicketCheckStatus.INVALID_STATE, current)

    def get_qr_path(self, code: str, user_id: int, is_staff: bool = False) -> Path:
        """Raises TicketNotFoundError if missing, not owned, or the file is gone."""
        ticket = self._owned_ticket(code, user_id, is_staff)
        return self._artifact_path(ticket, ticket.qr_file)

    def get_pdf_path(self, code: str, user_id: int, is_staff: bool = False) -> Path:
        """Raises TicketNotFoundError if missing, not owned, or the file is gone."""
        ticket = self._owned_ticket(code, user_id, is_staff)
        return self._artifact_path(ticket, ticket.pdf_file)

    def _find(self, code: str) -> Ticket | None:
        ticket_code = _parse_code(code)
        return self._tickets.get_ticket_by_code(ticket_code) if ticket_code else None

    def _owned_ticket(self, code: str, user_id: int, is_staff: bool) -> Ticket:
        ticket = self._find(code)
        if ticket is None:
            raise TicketNotFoundError()
        if not is_staff and self._tickets.get_ticket_owner_id(ticket.code) != user_id:
            raise TicketNotFoundError()
        return ticket

    def _artifact_path(self, ticket: Ticket, filename: str) -> Path:
        path = self._artifacts.path_for(filename)
        if not path.is_file():
            logger.error("Artifact %s for ticket %s is missing on disk", filename, ticket.code)
            raise TicketNotFoundError()
        return path
