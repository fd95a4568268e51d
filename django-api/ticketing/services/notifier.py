"""Ticket delivery, reminder and expiry emails.

Every attempt is recorded as a Notification: QUEUED before sending, then
SENT or FAILED. Send failures of any kind are recorded and logged, never
raised, so no record stays QUEUED once its attempt is over.
"""

import logging
import smtplib
from collections.abc import Iterable
from datetime import datetime, timedelta
from pathlib import Path

from django.conf import settings
from django.core.mail import EmailMultiAlternatives, get_connection
from django.template.loader import render_to_string
from django.utils import timezone
from django.utils.html import strip_tags

from ticketing.domain import (
    Attendee,
    Event,
    Notification,
    NotificationType,
    Order,
    Ticket,
)
from ticketing.stores.interfaces import NotificationStore

logger = logging.getLogger(__name__)


class EmailSender:
    """Sends multipart emails over one configured Django email connection."""

    def __init__(self, connection, from_email: str) -> None:
        self._connection = connection
        self._from_email = from_email

    @classmethod
    def from_settings(cls) -> "EmailSender":
        return cls(
            connection=get_connection(fail_silently=False),
            from_email=settings.DEFAULT_FROM_EMAIL,
        )

    def send(self, to: str, subject: str, html_body: str, attachments: Iterable[Path] = ()) -> None:
        """Raises on any delivery problem, including a blank recipient."""
        if not to:
            raise smtplib.SMTPException("No recipient address")
        message = EmailMultiAlternatives(
            subject=subject,
            body=strip_tags(html_body),
            from_email=self._from_email,
            to=[to],
            connection=self._connection,
        )
        message.attach_alternative(html_body, "text/html")
        for path in attachments:
            message.attach_file(str(path), mimetype="application/pdf")
        if not message.send(fail_silently=False):
            raise smtplib.SMTPException("Email backend accepted no message")


class Notifier:
    """Service for user-facing notifications."""

    def __init__(
        self,
        store: NotificationStore,
        sender: EmailSender,
        artifact_dir: Path,
        reminder_lead: timedelta = timedelta(hours=24),
    ) -> None:
        self._store = store
        self._sender = sender
        self._artifact_dir = Path(artifact_dir)
        self._reminder_lead = reminder_lead

    def send_ticket_delivery(self, order: Order, tickets: list[Ticket]) -> Notification:
        """Email the buyer their ticket codes with each ticket PDF attached."""
        context = {
            **self._event_context(order.buyer, order.event),
            "order_id": str(order.id),
            "order_total": str(order.total),
            "ticket_codes": [str(ticket.code) for ticket in tickets],
        }
        return self._deliver(
            attendee=order.buyer,
            type=NotificationType.TICKETS,
            subject=f"Your Tickets for {order.event.title}",
            template="ticketing/emails/tickets.html",
            context=context,
            attachments=[self._artifact_dir / ticket.pdf_file for ticket in tickets],
        )

    def send_event_reminder(self, attendee: Attendee, event: Event, tickets: list[Ticket]) -> Notification:
        context = {
            **self._event_context(attendee, event),
            "ticket_codes": [str(ticket.code) for ticket in tickets],
        }
        return self._deliver(
            attendee=attendee,
            type=NotificationType.REMINDER,
            subject=f"Reminder: {event.title} is coming up!",
            template="ticketing/emails/reminder.html",
            context=context,
        )

    def send_order_expired(self, order: Order, was_paid: bool = False) -> Notification:
        """Tell the buyer the order lapsed, or that its payment was reversed and its tickets void."""
        context = {
            "was_paid": was_paid,
            **self._event_context(order.buyer, order.event),
            "order_id": str(order.id),
            "expired_at": timezone.localtime(),
        }
        return self._deliver(
            attendee=order.buyer,
            type=NotificationType.EXPIRY,
            subject=f"Order Expired: {order.event.title}",
            template="ticketing/emails/expiry.html",
            context=context,
        )

    def schedule_event_reminder(self, attendee: Attendee, event: Event) -> datetime | None:
        """Return when the reminder for ``event`` is due, or None if already past.

        Reminders are sent by the ``send_event_reminders`` command.
        """
        remind_at = event.starts_at - self._reminder_lead
        if remind_at <= timezone.now():
            return None
        logger.info("Reminder for event %s to %s due at %s", event.id, attendee.email, remind_at)
        return remind_at

    def schedule_order_expiry(self, order: Order, expires_at: datetime | None) -> None:
        """Log when the order's invoice lapses; the provider reports EXPIRED then."""
        logger.info("Order %s invoice expires at %s", order.id, expires_at or "provider default")

    def list_notifications(self, user_id: int) -> list[Notification]:
        return self._store.list_notifications_for_user(user_id)

    def _event_context(self, attendee: Attendee, event: Event) -> dict:
        starts_at = timezone.localtime(event.starts_at)
        return {
            "user_name": attendee.display_name,
            "event_name": event.title,
            "event_date": f"{starts_at:%A, %d %B %Y}",
            "event_time": f"{starts_at:%H:%M %Z}",
            "event_location": event.location,
        }

    def _deliver(
        self,
        attendee: Attendee,
        type: NotificationType,
        subject: str,
        template: str,
        context: dict,
        attachments: Iterable[Path] = (),
    ) -> Notification:
        html_body = render_to_string(template, context)
        notification = self._store.create_notification(attendee.id, type, subject, html_body)
        try:
            self._sender.send(attendee.email, subject, html_body, attachments)
        except Exception as exc:
            logger.error("Failed to send %s email to %s: %s", type.value, attendee.email, exc)
            return self._store.mark_failed(notification.id, str(exc) or exc.__class__.__name__)
        logger.info("%s email sent to %s", type.value, attendee.email)
        return self._store.mark_sent(notification.id)
