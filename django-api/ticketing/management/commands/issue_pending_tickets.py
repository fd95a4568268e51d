"""Issue tickets for paid orders that have none.

Recovery path for orders whose issuance failed during the payment
callback (artifact or storage errors). Safe to run repeatedly.
"""

import logging

from django.core.management.base import BaseCommand

from ticketing import dependencies
from ticketing.domain.errors import DomainError
from ticketing.stores import DjangoOrderStore

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Issue tickets for PAID orders without tickets."

    def handle(self, *args, **options):
        orders = DjangoOrderStore().list_paid_orders_without_tickets()
        issuance = dependencies.build_issuance_service()

        issued = failed = 0
        for order in orders:
            try:
                result = issuance.issue_tickets(order)
            except DomainError as e:
                failed += 1
                logger.error("Issuance retry failed for order %s: %s", order.id, e)
                self.stderr.write(f"Order {order.id}: {e}")
                continue
            if result.created:
                issued += 1

        self.stdout.write(self.style.SUCCESS(f"Issued tickets for {issued} orders ({failed} failed)"))
