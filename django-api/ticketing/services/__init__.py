from ticketing.services.event_service import EventService
from ticketing.services.issuance_service import TicketIssuanceService
from ticketing.services.notifier import EmailSender, Notifier
from ticketing.services.order_service import OrderService
from ticketing.services.payment_reconciler import PaymentReconciler
from ticketing.services.ticket_service import TicketService
from ticketing.services.webhook_service import PaymentWebhookService

__all__ = [
    "EmailSender",
    "EventService",
    "Notifier",
    "OrderService",
    "PaymentReconciler",
    "PaymentWebhookService",
    "TicketIssuanceService",
    "TicketService",
]
