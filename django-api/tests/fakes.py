"""Test doubles for the ticketing collaborators."""

import smtplib
from datetime import datetime, timedelta
from decimal import Decimal
from uuid import uuid4

from django.utils import timezone

from ticketing.artifacts import TicketArtifactGenerator
from ticketing.domain import Attendee, Event, EventId, Invoice, Money
from ticketing.domain.errors import ArtifactGenerationError, PaymentProviderError
from ticketing.gateways import InvoiceRequest, PaymentGateway
from ticketing.services import EmailSender


class FakePaymentGateway(PaymentGateway):
    """Records invoice requests; fails every call when ``fail`` is set."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.requests: list[InvoiceRequest] = []

    def create_invoice(self, request: InvoiceRequest) -> Invoice:
        self.requests.append(request)
        if self.fail:
            raise PaymentProviderError()
        return Invoice(
            id=f"inv-{len(self.requests)}",
            invoice_url=f"https://checkout.test/{request.external_id}",
            status="PENDING",
            expiry_date=timezone.now() + timedelta(days=1),
        )


class BrokenEmailSender(EmailSender):
    """Sender whose transport is always down."""

    def __init__(self) -> None:
        super().__init__(connection=None, from_email="noreply@test")

    def send(self, to, subject, html_body, attachments=()):
        raise smtplib.SMTPException("SMTP server unavailable")


class MisconfiguredEmailSender(EmailSender):
    """Sender that fails with something other than a transport error."""

    def __init__(self) -> None:
        super().__init__(connection=None, from_email="noreply@test")

    def send(self, to, subject, html_body, attachments=()):
        raise ValueError("Invalid address in From header")


class FlakyArtifactGenerator(TicketArtifactGenerator):
    """Fails the n-th PDF it is asked to render."""

    def __init__(self, directory, fail_on: int) -> None:
        super().__init__(directory)
        self.fail_on = fail_on
        self.pdf_calls = 0

    def generate_pdf(self, code, event, attendee):
        self.pdf_calls += 1
        if self.pdf_calls == self.fail_on:
            raise ArtifactGenerationError("disk full")
        return super().generate_pdf(code, event, attendee)


def make_event(**overrides) -> Event:
    starts_at: datetime = overrides.pop("starts_at", timezone.now() + timedelta(days=7))
    fields = {
        "id": EventId(uuid4()),
        "title": "Jazz Night",
        "description": "An evening of live jazz.",
        "location": "Jakarta Convention Center",
        "starts_at": starts_at,
        "ends_at": starts_at + timedelta(hours=3),
        "price": Money(Decimal("50000.00")),
        "is_published": True,
        "created_at": timezone.now(),
        "updated_at": timezone.now(),
    }
    fields.update(overrides)
    return Event(**fields)


def make_attendee(**overrides) -> Attendee:
    fields = {"id": 1, "email": "buyer@example.com", "name": "Budi Santoso"}
    fields.update(overrides)
    return Attendee(**fields)
