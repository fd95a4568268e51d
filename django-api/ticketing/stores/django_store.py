"""Django ORM implementations of the ticketing stores."""

from datetime import datetime

from django.db import IntegrityError, transaction
from django.db.models import Exists, OuterRef

from ticketing import models
from ticketing.domain import (
    Attendee,
    Event,
    EventId,
    Money,
    Notification,
    NotificationStatus,
    NotificationType,
    Order,
    OrderId,
    OrderPaymentPatch,
    PaymentStatus,
    Quantity,
    Ticket,
    TicketCode,
    TicketId,
)
from ticketing.domain.errors import TicketBatchConflictError
from ticketing.stores.interfaces import EventStore, NotificationStore, OrderStore, TicketStore


def to_attendee(user) -> Attendee:
    return Attendee(id=user.pk, email=user.email, name=user.get_full_name())


def to_event(row: models.Event) -> Event:
    return Event(
        id=EventId(row.id),
        title=row.title,
        description=row.description,
        location=row.location,
        starts_at=row.starts_at,
        ends_at=row.ends_at,
        price=Money(row.price),
        is_published=row.is_published,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def to_order(row: models.Order) -> Order:
    return Order(
        id=OrderId(row.id),
        buyer=to_attendee(row.buyer),
        event=to_event(row.event),
        quantity=Quantity(row.quantity),
        unit_price=Money(row.unit_price),
        total=Money(row.total_amount),
        payment_status=PaymentStatus(row.payment_status),
        payment_ref=row.payment_ref,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def to_ticket(row: models.Ticket) -> Ticket:
    return Ticket(
        id=TicketId(row.id),
        order_id=OrderId(row.order_id),
        event_id=EventId(row.event_id),
        position=row.position,
        code=TicketCode(row.code),
        qr_file=row.qr_file,
        pdf_file=row.pdf_file,
        issued_at=row.issued_at,
        is_used=row.is_used,
        used_at=row.used_at,
    )


def to_notification(row: models.Notification) -> Notification:
    return Notification(
        id=row.id,
        user_id=row.user_id,
        type=NotificationType(row.type),
        subject=row.subject,
        message=row.message,
        status=NotificationStatus(row.status),
        error=row.error,
        created_at=row.created_at,
    )


class DjangoEventStore(EventStore):
    """Event store backed by the Django ORM."""

    def list_published_events(self) -> list[Event]:
        rows = models.Event.objects.filter(is_published=True).order_by("starts_at")
        return [to_event(row) for row in rows]

    def get_event(self, event_id: EventId) -> Event | None:
        row = models.Event.objects.filter(pk=event_id.value).first()
        return to_event(row) if row else None

    def list_published_events_starting_between(self, start: datetime, end: datetime) -> list[Event]:
        rows = models.Event.objects.filter(
            is_published=True, starts_at__gte=start, starts_at__lt=end
        ).order_by("starts_at")
        return [to_event(row) for row in rows]


class DjangoOrderStore(OrderStore):
    """Order store backed by the Django ORM."""

    def _queryset(self):
        return models.Order.objects.select_related("buyer", "event")

    def create_order(self, order: Order) -> Order:
        row = models.Order.objects.create(
            id=order.id.value,
            buyer_id=order.buyer.id,
            event_id=order.event.id.value,
            quantity=order.quantity.value,
            unit_price=order.unit_price.amount,
            total_amount=order.total.amount,
            payment_status=order.payment_status.value,
            payment_ref=order.payment_ref,
        )
        return to_order(self._queryset().get(pk=row.pk))

    def get_order(self, order_id: OrderId) -> Order | None:
        row = self._queryset().filter(pk=order_id.value).first()
        return to_order(row) if row else None

    def delete_order(self, order_id: OrderId) -> None:
        models.Order.objects.filter(pk=order_id.value).delete()

    def set_payment_ref(self, order_id: OrderId, payment_ref: str) -> Order:
        row = self._queryset().get(pk=order_id.value)
        row.payment_ref = payment_ref
        row.save(update_fields=["payment_ref", "updated_at"])
        return to_order(row)

    def apply_payment_patch(
        self, order_id: OrderId, patch: OrderPaymentPatch, expected_status: PaymentStatus
    ) -> bool:
        with transaction.atomic():
            row = (
                models.Order.objects.select_for_update()
                .filter(pk=order_id.value, payment_status=expected_status.value)
                .first()
            )
            if row is None:
                return False
            row.payment_status = patch.payment_status.value
            update_fields = ["payment_status", "updated_at"]
            if patch.payment_ref:
                row.payment_ref = patch.payment_ref
                update_fields.append("payment_ref")
            row.save(update_fields=update_fields)
        return True

    def list_orders_for_buyer(self, buyer_id: int) -> list[Order]:
        rows = self._queryset().filter(buyer_id=buyer_id).order_by("-created_at")
        return [to_order(row) for row in rows]

    def list_paid_orders_without_tickets(self) -> list[Order]:
        has_tickets = models.Ticket.objects.filter(order_id=OuterRef("pk"))
        rows = (
            self._queryset()
            .filter(payment_status=models.Order.PaymentStatus.PAID)
            .filter(~Exists(has_tickets))
            .order_by("created_at")
        )
        return [to_order(row) for row in rows]


class DjangoTicketStore(TicketStore):
    """Ticket store backed by the Django ORM."""

    def list_tickets_for_order(self, order_id: OrderId) -> list[Ticket]:
        rows = models.Ticket.objects.filter(order_id=order_id.value).order_by("position")
        return [to_ticket(row) for row in rows]

    def save_ticket_batch(self, order_id: OrderId, tickets: list[Ticket]) -> list[Ticket]:
        rows = [
            models.Ticket(
                id=ticket.id.value,
                order_id=order_id.value,
                event_id=ticket.event_id.value,
                position=ticket.position,
                code=ticket.code.value,
                qr_file=ticket.qr_file,
                pdf_file=ticket.pdf_file,
                issued_at=ticket.issued_at,
                is_used=ticket.is_used,
                used_at=ticket.used_at,
            )
            for ticket in tickets
        ]
        try:
            with transaction.atomic():
                # Row lock serialises concurrent issuance for the same order.
                models.Order.objects.select_for_update().filter(pk=order_id.value).first()
                if models.Ticket.objects.filter(order_id=order_id.value).exists():
                    raise TicketBatchConflictError()
                models.Ticket.objects.bulk_create(rows)
        except IntegrityError as exc:
            if models.Ticket.objects.filter(order_id=order_id.value).exists():
                raise TicketBatchConflictError() from exc
            raise
        return self.list_tickets_for_order(order_id)

    def get_ticket_by_code(self, code: TicketCode) -> Ticket | None:
        row = models.Ticket.objects.filter(code=code.value).first()
        return to_ticket(row) if row else None

    def get_ticket_owner_id(self, code: TicketCode) -> int | None:
        return (
            models.Ticket.objects.filter(code=code.value)
            .values_list("order__buyer_id", flat=True)
            .first()
        )

    def get_ticket_order_status(self, code: TicketCode) -> PaymentStatus | None:
        status = (
            models.Ticket.objects.filter(code=code.value)
            .values_list("order__payment_status", flat=True)
            .first()
        )
        return PaymentStatus(status) if status else None

    def list_tickets_for_buyer(self, buyer_id: int) -> list[Ticket]:
        rows = models.Ticket.objects.filter(order__buyer_id=buyer_id).order_by(
            "-issued_at", "position"
        )
        return [to_ticket(row) for row in rows]

    def mark_used(self, code: TicketCode, used_at: datetime) -> bool:
        updated = models.Ticket.objects.filter(
            code=code.value, is_used=False, order__payment_status=models.Order.PaymentStatus.PAID
        ).update(is_used=True, used_at=used_at)
        return updated == 1

    def list_ticket_holders(self, event_id: EventId) -> list[tuple[Attendee, list[Ticket]]]:
        rows = (
            models.Ticket.objects.filter(
                event_id=event_id.value, order__payment_status=models.Order.PaymentStatus.PAID
            )
            .select_related("order__buyer")
            .order_by("order__buyer_id", "order_id", "position")
        )
        holders: dict[int, tuple[Attendee, list[Ticket]]] = {}
        for row in rows:
            buyer = row.order.buyer
            if buyer.pk not in holders:
                holders[buyer.pk] = (to_attendee(buyer), [])
            holders[buyer.pk][1].append(to_ticket(row))
        return list(holders.values())


class DjangoNotificationStore(NotificationStore):
    """Notification store backed by the Django ORM."""

    def create_notification(
        self, user_id: int, type: NotificationType, subject: str, message: str
    ) -> Notification:
        row = models.Notification.objects.create(
            user_id=user_id,
            type=type.value,
            subject=subject[:150],
            message=message,
            status=models.Notification.Status.QUEUED,
        )
        return to_notification(row)

    def _set_status(self, notification_id: int, status: str, error: str = "") -> Notification:
        row = models.Notification.objects.get(pk=notification_id)
        row.status = status
        row.error = error
        row.save(update_fields=["status", "error", "updated_at"])
        return to_notification(row)

    def mark_sent(self, notification_id: int) -> Notification:
        return self._set_status(notification_id, models.Notification.Status.SENT)

    def mark_failed(self, notification_id: int, error: str) -> Notification:
        return self._set_status(notification_id, models.Notification.Status.FAILED, error)

    def list_notifications_for_user(self, user_id: int) -> list[Notification]:
        rows = models.Notification.objects.filter(user_id=user_id).order_by("-created_at", "-id")
        return [to_notification(row) for row in rows]
