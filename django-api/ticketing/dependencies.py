"""Request-scoped construction of services from settings.

Each collaborator is built with explicit configuration and never mutated
afterwards. Handlers and management commands obtain services here.
"""

from datetime import timedelta

from django.conf import settings

from ticketing.artifacts import TicketArtifactGenerator
from ticketing.domain import Attendee
from ticketing.gateways import PaymentGateway, XenditGateway
from ticketing.services import (
    EmailSender,
    EventService,
    Notifier,
    OrderService,
    PaymentReconciler,
    PaymentWebhookService,
    TicketIssuanceService,
    TicketService,
)
from ticketing.stores import (
    DjangoEventStore,
    DjangoNotificationStore,
    DjangoOrderStore,
    DjangoTicketStore,
)
from ticketing.stores.django_store import to_attendee


def current_attendee(request) -> Attendee:
    return to_attendee(request.user)


def build_event_service() -> EventService:
    return EventService(DjangoEventStore())


def build_payment_gateway() -> PaymentGateway:
    return XenditGateway(
        secret_key=settings.XENDIT_SECRET_KEY,
        base_url=settings.XENDIT_API_URL,
        timeout=settings.XENDIT_TIMEOUT_SECONDS,
        invoice_duration=settings.XENDIT_INVOICE_DURATION_SECONDS,
    )


def build_notifier() -> Notifier:
    return Notifier(
        store=DjangoNotificationStore(),
        sender=EmailSender.from_settings(),
        artifact_dir=settings.TICKET_ARTIFACT_DIR,
        reminder_lead=timedelta(hours=settings.EVENT_REMINDER_LEAD_HOURS),
    )


def build_order_service(notifier: Notifier | None = None) -> OrderService:
    return OrderService(
        orders=DjangoOrderStore(),
        events=build_event_service(),
        gateway=build_payment_gateway(),
        notifier=notifier or build_notifier(),
        frontend_url=settings.FRONTEND_URL,
    )


def build_issuance_service(notifier: Notifier | None = None) -> TicketIssuanceService:
    return TicketIssuanceService(
        tickets=DjangoTicketStore(),
        artifacts=TicketArtifactGenerator(settings.TICKET_ARTIFACT_DIR),
        notifier=notifier or build_notifier(),
    )


def build_webhook_service() -> PaymentWebhookService:
    notifier = build_notifier()
    return PaymentWebhookService(
        reconciler=PaymentReconciler(DjangoOrderStore()),
        issuance=build_issuance_service(notifier),
        notifier=notifier,
    )


def build_ticket_service() -> TicketService:
    return TicketService(
        tickets=DjangoTicketStore(),
        orders=build_order_service(),
        artifacts=TicketArtifactGenerator(settings.TICKET_ARTIFACT_DIR),
    )
