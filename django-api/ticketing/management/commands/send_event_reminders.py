"""Send reminder emails to ticket holders of upcoming events.

Meant to run periodically (e.g. hourly from cron). An event is picked up
when its start lies ``EVENT_REMINDER_LEAD_HOURS`` ahead, within a slot
``--window-hours`` wide.
"""

import logging
from datetime import timedelta

from django.conf import settings
from django.core.management.base import BaseCommand
from django.utils import timezone

from ticketing import dependencies
from ticketing.domain import NotificationStatus
from ticketing.stores import DjangoEventStore, DjangoTicketStore

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Email a reminder to every ticket holder of events starting soon."

    def add_arguments(self, parser):
        parser.add_argument(
            "--window-hours",
            type=int,
            default=1,
            help="Width of the start-time window to pick up (default: 1, matching an hourly schedule).",
        )

    def handle(self, *args, **options):
        lead = timedelta(hours=settings.EVENT_REMINDER_LEAD_HOURS)
        window_start = timezone.now() + lead
        window_end = window_start + timedelta(hours=options["window_hours"])

        events = DjangoEventStore().list_published_events_starting_between(window_start, window_end)
        tickets = DjangoTicketStore()
        notifier = dependencies.build_notifier()

        sent = failed = 0
        for event in events:
            for attendee, held in tickets.list_ticket_holders(event.id):
                notification = notifier.send_event_reminder(attendee, event, held)
                if notification.status is NotificationStatus.SENT:
                    sent += 1
                else:
                    failed += 1

        logger.info("Reminders for %d events: %d sent, %d failed", len(events), sent, failed)
        self.stdout.write(
            self.style.SUCCESS(f"Sent {sent} reminders for {len(events)} events ({failed} failed)")
        )
