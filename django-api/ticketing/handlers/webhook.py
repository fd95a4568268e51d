"""Payment provider callback endpoint.

Authenticated only by the shared secret in ``x-callback-token``. The
response acknowledges delivery, not the business result: anything that
passes the token and shape checks gets 200.
"""

import logging

from django.conf import settings
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from ticketing import dependencies
from ticketing.domain import PaymentNotification
from ticketing.handlers.serializers import PaymentWebhookSerializer
from ticketing.services.webhook_service import is_valid_callback_token

logger = logging.getLogger(__name__)

WEBHOOK_ACK = "Webhook received"


def _text(value) -> str | None:
    return value if isinstance(value, str) else None


class PaymentWebhookView(APIView):
    """Handler for POST /api/payments/webhook"""

    authentication_classes = []
    permission_classes = [AllowAny]

    def post(self, request: Request) -> Response:
        if not is_valid_callback_token(request.headers.get("x-callback-token"), settings.XENDIT_WEBHOOK_TOKEN):
            logger.error("Webhook received with invalid token from %s", request.META.get("REMOTE_ADDR"))
            return Response("Invalid token", status=status.HTTP_401_UNAUTHORIZED)

        serializer = PaymentWebhookSerializer(data=request.data)
        if not serializer.is_valid():
            if "external_id" in serializer.errors:
                logger.error("Webhook payload missing external_id")
                return Response("Missing external_id", status=status.HTTP_400_BAD_REQUEST)
            logger.error("Webhook payload invalid: %s", serializer.errors)
            return Response("Invalid payload", status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        logger.info("Received webhook for order %s with status %r", data["external_id"], data["status"])
        outcome = dependencies.build_webhook_service().handle(
            PaymentNotification(
                invoice_id=_text(data["id"]) or "",
                external_id=data["external_id"],
                status=_text(data["status"]) or "",
                payment_method=_text(data["payment_method"]),
                paid_at=_text(data["paid_at"]),
            )
        )
        logger.info("Webhook for order %s handled: %s", data["external_id"], outcome.value)
        return Response(WEBHOOK_ACK, status=status.HTTP_200_OK)
