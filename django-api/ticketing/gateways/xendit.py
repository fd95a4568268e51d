"""Xendit invoice API client."""

import logging
from datetime import datetime

import requests
from django.utils.dateparse import parse_datetime

from ticketing.domain import Invoice
from ticketing.domain.errors import PaymentProviderError
from ticketing.gateways.interfaces import InvoiceRequest, PaymentGateway

logger = logging.getLogger(__name__)


class XenditGateway(PaymentGateway):
    """Creates invoices through ``POST /v2/invoices``.

    The secret key is sent as the HTTP basic auth username, as the Xendit
    API expects.
    """

    def __init__(
        self,
        secret_key: str,
        base_url: str = "https://api.xendit.co",
        timeout: float = 10,
        invoice_duration: int | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self._secret_key = secret_key
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._invoice_duration = invoice_duration
        self._http = session or requests

    def create_invoice(self, request: InvoiceRequest) -> Invoice:
        payload = {
            "external_id": request.external_id,
            "payer_email": request.payer_email,
            "description": request.description,
            "amount": float(request.amount),
            "success_redirect_url": request.success_redirect_url,
            "failure_redirect_url": request.failure_redirect_url,
        }
        if self._invoice_duration:
            payload["invoice_duration"] = self._invoice_duration

        try:
            response = self._http.post(
                f"{self._base_url}/v2/invoices",
                json=payload,
                auth=(self._secret_key, ""),
                timeout=self._timeout,
            )
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as exc:
            logger.error("Xendit invoice creation failed for %s: %s", request.external_id, exc)
            raise PaymentProviderError() from exc
        except ValueError as exc:
            logger.error("Xendit returned a non-JSON body for %s", request.external_id)
            raise PaymentProviderError() from exc

        if not isinstance(data, dict) or not data.get("id") or not data.get("invoice_url"):
            logger.error("Invalid invoice response from Xendit for %s: %r", request.external_id, data)
            raise PaymentProviderError()

        logger.info("Created Xendit invoice %s for %s", data["id"], request.external_id)
        return Invoice(
            id=data["id"],
            invoice_url=data["invoice_url"],
            status=data.get("status", ""),
            expiry_date=_parse_expiry(data.get("expiry_date")),
        )


def _parse_expiry(value) -> datetime | None:
    if not isinstance(value, str):
        return None
    try:
        return parse_datetime(value)
    except ValueError:
        return None
