from django.urls import path

from ticketing.handlers import (
    EventDetailView,
    EventListView,
    NotificationListView,
    OrderDetailView,
    OrderListView,
    OrderTicketListView,
    PaymentWebhookView,
    TicketCheckView,
    TicketListView,
    TicketPDFView,
    TicketQRView,
    TicketRedeemView,
)

urlpatterns = [
    path("events", EventListView.as_view(), name="event-list"),
    path("events/<str:event_id>", EventDetailView.as_view(), name="event-detail"),
    path("orders", OrderListView.as_view(), name="order-list"),
    path("orders/<str:order_id>", OrderDetailView.as_view(), name="order-detail"),
    path("orders/<str:order_id>/tickets", OrderTicketListView.as_view(), name="order-tickets"),
    path("tickets", TicketListView.as_view(), name="ticket-list"),
    path("tickets/<str:code>/check", TicketCheckView.as_view(), name="ticket-check"),
    path("tickets/<str:code>/qr", TicketQRView.as_view(), name="ticket-qr"),
    path("tickets/<str:code>/pdf", TicketPDFView.as_view(), name="ticket-pdf"),
    path(
        "tickets/<str:code>/download",
        TicketPDFView.as_view(as_attachment=True),
        name="ticket-download",
    ),
    path("admin/tickets/<str:code>/redeem", TicketRedeemView.as_view(), name="ticket-redeem"),
    path("notifications", NotificationListView.as_view(), name="notification-list"),
    path("payments/webhook", PaymentWebhookView.as_view(), name="payment-webhook"),
]
