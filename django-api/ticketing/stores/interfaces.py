"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from ticketing.domain import (
    Attendee,
    Event,
    EventId,
    Notification,
    NotificationType,
    Order,
    OrderId,
    OrderPaymentPatch,
    PaymentStatus,
    Ticket,
    TicketCode,
)


class EventStore(ABC):
    """Interface for event persistence operations."""

    @abstractmethod
    def list_published_events(self) -> list[Event]:
        """Return published events ordered by starts_at ascending."""
        ...

    @abstractmethod
    def get_event(self, event_id: EventId) -> Event | None:
        """Return an event by ID, or None if not found."""
        ...

    @abstractmethod
    def list_published_events_starting_between(self, start: datetime, end: datetime) -> list[Event]:
        """Return published events with start in [start, end)."""
        ...


class OrderStore(ABC):
    """Interface for order persistence operations."""

    @abstractmethod
    def create_order(self, order: Order) -> Order:
        """Persist a new order under its pre-generated ID."""
        ...

    @abstractmethod
    def get_order(self, order_id: OrderId) -> Order | None:
        """Return an order with buyer and event resolved, or None."""
        ...

    @abstractmethod
    def delete_order(self, order_id: OrderId) -> None:
        ...

    @abstractmethod
    def set_payment_ref(self, order_id: OrderId, payment_ref: str) -> Order:
        """Record the provider invoice reference on a new order."""
        ...

    @abstractmethod
    def apply_payment_patch(
        self, order_id: OrderId, patch: OrderPaymentPatch, expected_status: PaymentStatus
    ) -> bool:
        """Apply ``patch`` only if the order is still in ``expected_status``.

        Returns False when the status changed underneath the caller.
        """
        ...

    @abstractmethod
    def list_orders_for_buyer(self, buyer_id: int) -> list[Order]:
        """Return a buyer's orders, newest first."""
        ...

    @abstractmethod
    def list_paid_orders_without_tickets(self) -> list[Order]:
        ...


class TicketStore(ABC):
    """Interface for ticket persistence operations."""

    @abstractmethod
    def list_tickets_for_order(self, order_id: OrderId) -> list[Ticket]:
        """Return an order's tickets ordered by position."""
        ...

    @abstractmethod
    def save_ticket_batch(self, order_id: OrderId, tickets: list[Ticket]) -> list[Ticket]:
        """Persist all tickets of an order in one transaction.

        Raises:
            TicketBatchConflictError: If the order already has tickets.
        """
        ...

    @abstractmethod
    def get_ticket_by_code(self, code: TicketCode) -> Ticket | None:
        ...

    @abstractmethod
    def get_ticket_owner_id(self, code: TicketCode) -> int | None:
        """Return the buyer ID of the order owning the ticket."""
        ...

    @abstractmethod
    def get_ticket_order_status(self, code: TicketCode) -> PaymentStatus | None:
        """Return the payment status of the order owning the ticket."""
        ...

    @abstractmethod
    def list_tickets_for_buyer(self, buyer_id: int) -> list[Ticket]:
        """Return a buyer's tickets, most recently issued first."""
        ...

    @abstractmethod
    def mark_used(self, code: TicketCode, used_at: datetime) -> bool:
        """Flip is_used to True if it is still False and the order is PAID.

        Returns whether it flipped.
        """
        ...

    @abstractmethod
    def list_ticket_holders(self, event_id: EventId) -> list[tuple[Attendee, list[Ticket]]]:
        """Group the tickets of PAID orders for an event by buyer."""
        ...


class NotificationStore(ABC):
    """Interface for the notification audit trail."""

    @abstractmethod
    def create_notification(
        self, user_id: int, type: NotificationType, subject: str, message: str
    ) -> Notification:
        """Record a QUEUED notification."""
        ...

    @abstractmethod
    def mark_sent(self, notification_id: int) -> Notification:
        ...

    @abstractmethod
    def mark_failed(self, notification_id: int, error: str) -> Notification:
        ...

    @abstractmethod
    def list_notifications_for_user(self, user_id: int) -> list[Notification]:
        ...
