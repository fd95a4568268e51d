from ticketing.domain.models import (
    Attendee,
    Event,
    Invoice,
    IssuanceResult,
    Notification,
    Order,
    OrderPaymentPatch,
    PaymentNotification,
    PlacedOrder,
    ReconcileOutcome,
    ReconcileResult,
    Ticket,
    TicketArtifacts,
    TicketCheckResult,
    TicketCheckStatus,
    WebhookOutcome,
)
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

__all__ = [
    "Attendee",
    "Event",
    "Invoice",
    "IssuanceResult",
    "Notification",
    "Order",
    "OrderPaymentPatch",
    "PaymentNotification",
    "PlacedOrder",
    "ReconcileOutcome",
    "ReconcileResult",
    "Ticket",
    "TicketArtifacts",
    "TicketCheckResult",
    "TicketCheckStatus",
    "WebhookOutcome",
    "EventId",
    "Money",
    "NotificationStatus",
    "NotificationType",
    "OrderId",
    "PaymentStatus",
    "Quantity",
    "TicketCode",
    "TicketId",
]
