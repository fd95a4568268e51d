"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in ticketing/models.py (persistence layer).
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from ticketing.domain.value_objects import (
    EventId,
    Money,
    NotificationStatus,
    NotificationType,
    OrderId,
    PaymentStatus,
    Quantity,
    TicketCode,
    TicketId,
)


@dataclass(frozen=True)
class Attendee:
    """The buyer of an order, as seen by ticketing."""

    id: int
    email: str
    name: str = ""

    @property
    def display_name(self) -> str:
        return self.name or self.email


@dataclass(frozen=True)
class Event:
    """Domain representation of an Event."""

    id: EventId
    title: str
    description: str
    location: str
    starts_at: datetime
    ends_at: datetime
    price: Money
    is_published: bool
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class Order:
    """Domain representation of an Order.

    ``unit_price`` is a snapshot of the event price at creation time and
    ``total`` is fixed to ``quantity * unit_price`` at the same instant.
    """

    id: OrderId
    buyer: Attendee
    event: Event
    quantity: Quantity
    unit_price: Money
    total: Money
    payment_status: PaymentStatus
    payment_ref: str | None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def place(cls, buyer: Attendee, event: Event, quantity: Quantity) -> "Order":
        """Build a new PENDING order priced at the event's current price."""
        return cls(
            id=OrderId.generate(),
            buyer=buyer,
            event=event,
            quantity=quantity,
            unit_price=event.price,
            total=event.price.times(quantity),
            payment_status=PaymentStatus.PENDING,
            payment_ref=None,
        )

    @property
    def is_paid(self) -> bool:
        return self.payment_status is PaymentStatus.PAID


@dataclass(frozen=True)
class OrderPaymentPatch:
    """The only fields of an Order that may change after creation."""

    payment_status: PaymentStatus
    payment_ref: str | None = None


@dataclass(frozen=True)
class Ticket:
    """Domain representation of a Ticket."""

    id: TicketId
    order_id: OrderId
    event_id: EventId
    position: int
    code: TicketCode
    qr_file: str
    pdf_file: str
    issued_at: datetime
    is_used: bool = False
    used_at: datetime | None = None


@dataclass(frozen=True)
class TicketArtifacts:
    """Filenames of the generated files for one ticket code."""

    qr_file: str
    pdf_file: str


@dataclass(frozen=True)
class Notification:
    """Audit record of one attempted message."""

    id: int
    user_id: int
    type: NotificationType
    subject: str
    message: str
    status: NotificationStatus
    error: str
    created_at: datetime


@dataclass(frozen=True)
class Invoice:
    """The provider's response to an invoice creation request."""

    id: str
    invoice_url: str
    status: str
    expiry_date: datetime | None = None


@dataclass(frozen=True)
class PlacedOrder:
    """A freshly created order together with its hosted checkout URL."""

    order: Order
    invoice_url: str


@dataclass(frozen=True)
class PaymentNotification:
    """Payload of a provider status-change callback."""

    invoice_id: str
    external_id: str
    status: str
    payment_method: str | None = None
    paid_at: str | None = None


class ReconcileOutcome(Enum):
    UPDATED = "UPDATED"
    UNCHANGED = "UNCHANGED"
    REJECTED = "REJECTED"
    NOT_FOUND = "NOT_FOUND"


@dataclass(frozen=True)
class ReconcileResult:
    outcome: ReconcileOutcome
    order: Order | None = None
    previous_status: PaymentStatus | None = None


@dataclass(frozen=True)
class IssuanceResult:
    """Tickets of an order and whether this call created them."""

    tickets: tuple[Ticket, ...]
    created: bool


class WebhookOutcome(Enum):
    IGNORED_MALFORMED_ID = "IGNORED_MALFORMED_ID"
    IGNORED_UNKNOWN_STATUS = "IGNORED_UNKNOWN_STATUS"
    ORDER_NOT_FOUND = "ORDER_NOT_FOUND"
    RECONCILED = "RECONCILED"
    TICKETS_ISSUED = "TICKETS_ISSUED"
    ISSUANCE_FAILED = "ISSUANCE_FAILED"


class TicketCheckStatus(Enum):
    VALID = "VALID"
    NOT_FOUND = "NOT_FOUND"
    NOT_OWNED = "NOT_OWNED"
    INVALID_STATE = "INVALID_STATE"
    ALREADY_USED = "ALREADY_USED"


@dataclass(frozen=True)
class TicketCheckResult:
    status: TicketCheckStatus
    ticket: Ticket | None = None

    @property
    def is_valid(self) -> bool:
        return self.status is TicketCheckStatus.VALID
