"""Payment provider interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal

from ticketing.domain import Invoice


@dataclass(frozen=True)
class InvoiceRequest:
    external_id: str
    payer_email: str
    description: str
    amount: Decimal
    success_redirect_url: str
    failure_redirect_url: str


class PaymentGateway(ABC):
    """Creates hosted-checkout invoices at the payment provider."""

    @abstractmethod
    def create_invoice(self, request: InvoiceRequest) -> Invoice:
        """Create an invoice referencing ``request.external_id``.

        Raises:
            PaymentProviderError: On network error, timeout, non-2xx
                response or a response without an invoice ID.
        """
        ...
