"""Domain error codes for the ticketing module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    INVALID_EVENT_ID = "INVALID_EVENT_ID"
    ORDER_NOT_FOUND = "ORDER_NOT_FOUND"
    INVALID_ORDER_ID = "INVALID_ORDER_ID"
    ORDER_NOT_PAID = "ORDER_NOT_PAID"
    ORDER_INCOMPLETE = "ORDER_INCOMPLETE"
    TICKET_NOT_FOUND = "TICKET_NOT_FOUND"
    PAYMENT_PROVIDER_FAILED = "PAYMENT_PROVIDER_FAILED"
    ARTIFACT_GENERATION_FAILED = "ARTIFACT_GENERATION_FAILED"
    TICKET_ISSUANCE_FAILED = "TICKET_ISSUANCE_FAILED"
    TICKET_BATCH_CONFLICT = "TICKET_BATCH_CONFLICT"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class EventNotFoundError(DomainError):
    """Raised when an event is not found or not published."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_FOUND,
            message="Event not found",
        )


class InvalidEventIdError(DomainError):
    """Raised when an event ID is invalid."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_EVENT_ID,
            message="Invalid event ID format",
        )


class OrderNotFoundError(DomainError):
    """Raised when an order is not found for the requesting buyer."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.ORDER_NOT_FOUND,
            message="Order not found",
        )


class InvalidOrderIdError(DomainError):
    """Raised when an order ID is invalid."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_ORDER_ID,
            message="Invalid order ID format",
        )


class OrderNotPaidError(DomainError):
    """Raised when tickets are requested for an order that is not PAID."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.ORDER_NOT_PAID,
            message="Order is not paid",
        )


class IncompleteOrderError(DomainError):
    """Raised when an order lacks its buyer or event association."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.ORDER_INCOMPLETE,
            message="Order data is incomplete",
        )


class TicketNotFoundError(DomainError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.TICKET_NOT_FOUND,
            message="Ticket not found",
        )


class PaymentProviderError(DomainError):
    """Raised for any invoice creation failure: network, non-2xx, bad body."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.PAYMENT_PROVIDER_FAILED,
            message="Failed to process payment. Please try again.",
        )


class ArtifactGenerationError(DomainError):
    """Raised when a QR image or PDF cannot be written."""

    def __init__(self, message: str = "Ticket artifact generation failed") -> None:
        super().__init__(
            code=ErrorCode.ARTIFACT_GENERATION_FAILED,
            message=message,
        )


class TicketIssuanceError(DomainError):
    """Raised when a ticket batch could not be persisted as a whole."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.TICKET_ISSUANCE_FAILED,
            message="Ticket issuance failed",
        )


class TicketBatchConflictError(DomainError):
    """Raised by a store when another batch for the order won the race."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.TICKET_BATCH_CONFLICT,
            message="Tickets already issued for order",
        )
