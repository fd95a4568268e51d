from ticketing.handlers.views import (
    EventDetailView,
    EventListView,
    NotificationListView,
    OrderDetailView,
    OrderListView,
    OrderTicketListView,
    TicketCheckView,
    TicketListView,
    TicketPDFView,
    TicketQRView,
    TicketRedeemView,
)
from ticketing.handlers.webhook import PaymentWebhookView

__all__ = [
    "EventDetailView",
    "EventListView",
    "NotificationListView",
    "OrderDetailView",
    "OrderListView",
    "OrderTicketListView",
    "PaymentWebhookView",
    "TicketCheckView",
    "TicketListView",
    "TicketPDFView",
    "TicketQRView",
    "TicketRedeemView",
]
