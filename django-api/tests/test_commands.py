"""Tests for the periodic management commands.

Run with: pytest tests/test_commands.py -v
"""

from datetime import timedelta
from io import StringIO

import pytest
from django.core.management import call_command
from django.utils import timezone

from ticketing import models


def add_ticket(order, position=1, code="TKT-LZ1K2M3N-ABCD1234"):
    return models.Ticket.objects.create(
        order=order,
        event=order.event,
        position=position,
        code=code,
        qr_file=f"qr-{code}.png",
        pdf_file=f"ticket-{code}.pdf",
        issued_at=timezone.now(),
    )


@pytest.mark.django_db
class TestSendEventReminders:
    """Tests for manage.py send_event_reminders"""

    def test_reminds_each_holder_once(self, settings, event_factory, order_factory, other_user, mailoutbox):
        settings.EVENT_REMINDER_LEAD_HOURS = 24
        event = event_factory(starts_at=timezone.now() + timedelta(hours=24, minutes=30))
        first = order_factory(event=event, payment_status=models.Order.PaymentStatus.PAID)
        add_ticket(first, 1, "TKT-LZ1K2M3N-AAAA0001")
        add_ticket(first, 2, "TKT-LZ1K2M3N-AAAA0002")
        second = order_factory(event=event, buyer=other_user, payment_status=models.Order.PaymentStatus.PAID)
        add_ticket(second, 1, "TKT-LZ1K2M3N-BBBB0001")
        out = StringIO()

        call_command("send_event_reminders", stdout=out)

        assert sorted(m.to[0] for m in mailoutbox) == ["buyer@example.com", "other@example.com"]
        buyer_mail = next(m for m in mailoutbox if m.to == ["buyer@example.com"])
        assert "TKT-LZ1K2M3N-AAAA0001" in buyer_mail.body
        assert "TKT-LZ1K2M3N-AAAA0002" in buyer_mail.body
        assert models.Notification.objects.filter(type=models.Notification.Type.REMINDER).count() == 2
        assert "Sent 2 reminders for 1 events" in out.getvalue()

    def test_events_outside_window_are_skipped(self, settings, event_factory, order_factory, mailoutbox):
        settings.EVENT_REMINDER_LEAD_HOURS = 24
        event = event_factory(starts_at=timezone.now() + timedelta(days=3))
        add_ticket(order_factory(event=event, payment_status=models.Order.PaymentStatus.PAID))

        call_command("send_event_reminders", stdout=StringIO())

        assert mailoutbox == []

    def test_wider_window_picks_up_more(self, settings, event_factory, order_factory, mailoutbox):
        settings.EVENT_REMINDER_LEAD_HOURS = 24
        event = event_factory(starts_at=timezone.now() + timedelta(hours=27))
        add_ticket(order_factory(event=event, payment_status=models.Order.PaymentStatus.PAID))

        call_command("send_event_reminders", "--window-hours", "6", stdout=StringIO())

        assert len(mailoutbox) == 1

    def test_holders_of_reversed_orders_are_skipped(self, settings, event_factory, order_factory, mailoutbox):
        settings.EVENT_REMINDER_LEAD_HOURS = 24
        event = event_factory(starts_at=timezone.now() + timedelta(hours=24, minutes=30))
        add_ticket(order_factory(event=event, payment_status=models.Order.PaymentStatus.EXPIRED))

        call_command("send_event_reminders", stdout=StringIO())

        assert mailoutbox == []


@pytest.mark.django_db
class TestIssuePendingTickets:
    """Tests for manage.py issue_pending_tickets"""

    def test_issues_for_paid_orders_without_tickets(self, paid_order, pending_order, mailoutbox):
        out = StringIO()

        call_command("issue_pending_tickets", stdout=out)

        assert models.Ticket.objects.filter(order=paid_order).count() == 2
        assert not models.Ticket.objects.filter(order=pending_order).exists()
        assert "Issued tickets for 1 orders (0 failed)" in out.getvalue()
        assert len(mailoutbox) == 1

    def test_second_run_does_nothing(self, paid_order, mailoutbox):
        call_command("issue_pending_tickets", stdout=StringIO())
        out = StringIO()

        call_command("issue_pending_tickets", stdout=out)

        assert models.Ticket.objects.count() == 2
        assert "Issued tickets for 0 orders" in out.getvalue()
        assert len(mailoutbox) == 1
