"""Domain primitives that enforce validity at creation time."""

import re
import secrets
import time
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Self
from uuid import UUID, uuid4


@dataclass(frozen=True)
class EventId:
    """Unique identifier for an Event."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class OrderId:
    """Unique identifier for an Order.

    Generated before the order is persisted so it can be shared with the
    payment provider as the invoice external reference.
    """

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    @classmethod
    def generate(cls) -> Self:
        return cls(value=uuid4())

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class TicketId:
    """Unique identifier for a Ticket."""

    value: UUID

    @classmethod
    def generate(cls) -> Self:
        return cls(value=uuid4())

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Money:
    """Price representation with validation."""

    amount: Decimal

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise ValueError("Money amount cannot be negative")

    def times(self, quantity: "Quantity") -> "Money":
        return Money(amount=self.amount * quantity.value)

    def __str__(self) -> str:
        return f"{self.amount:.2f}"


MAX_TICKETS_PER_ORDER = 10


@dataclass(frozen=True)
class Quantity:
    """Number of tickets in an order, between 1 and MAX_TICKETS_PER_ORDER."""

    value: int

    def __post_init__(self) -> None:
        if self.value < 1:
            raise ValueError("Quantity must be at least 1")
        if self.value > MAX_TICKETS_PER_ORDER:
            raise ValueError(f"Quantity must be at most {MAX_TICKETS_PER_ORDER}")


_BASE36 = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"
TICKET_CODE_PATTERN = re.compile(r"^TKT-[0-9A-Z]+-[0-9A-Z]{8}$")


def _to_base36(number: int) -> str:
    digits = []
    while number:
        number, rem = divmod(number, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits)) or "0"


@dataclass(frozen=True)
class TicketCode:
    """Human-typeable ticket code: ``TKT-<base36 millis>-<8 random chars>``."""

    value: str

    def __post_init__(self) -> None:
        if not TICKET_CODE_PATTERN.match(self.value):
            raise ValueError("Invalid ticket code format")

    @classmethod
    def generate(cls) -> Self:
        timestamp = _to_base36(time.time_ns() // 1_000_000)
        suffix = "".join(secrets.choice(_BASE36) for _ in range(8))
        return cls(value=f"TKT-{timestamp}-{suffix}")

    @property
    def qr_filename(self) -> str:
        return f"qr-{self.value}.png"

    @property
    def pdf_filename(self) -> str:
        return f"ticket-{self.value}.pdf"

    def __str__(self) -> str:
        return self.value


class PaymentStatus(Enum):
    """Order payment status."""

    PENDING = "PENDING"
    PAID = "PAID"
    EXPIRED = "EXPIRED"

    @classmethod
    def from_provider(cls, value: str | None) -> "PaymentStatus | None":
        """Map the provider status vocabulary; unknown values map to None."""
        try:
            return cls(value)
        except ValueError:
            return None


class NotificationType(Enum):
    TICKETS = "TICKETS"
    REMINDER = "REMINDER"
    EXPIRY = "EXPIRY"


class NotificationStatus(Enum):
    QUEUED = "QUEUED"
    SENT = "SENT"
    FAILED = "FAILED"
