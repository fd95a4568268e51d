"""Serializers for request input and for rendering domain models."""

from rest_framework import serializers

from ticketing.domain.value_objects import MAX_TICKETS_PER_ORDER


class EventSerializer(serializers.Serializer):
    """Serializer for Event domain model."""

    id = serializers.UUIDField(source="id.value")
    title = serializers.CharField()
    description = serializers.CharField()
    location = serializers.CharField()
    starts_at = serializers.DateTimeField()
    ends_at = serializers.DateTimeField()
    price = serializers.DecimalField(source="price.amount", max_digits=12, decimal_places=2)


class OrderSerializer(serializers.Serializer):
    """Serializer for Order domain model."""

    id = serializers.UUIDField(source="id.value")
    event_id = serializers.UUIDField(source="event.id.value")
    event_title = serializers.CharField(source="event.title")
    quantity = serializers.IntegerField(source="quantity.value")
    unit_price = serializers.DecimalField(source="unit_price.amount", max_digits=12, decimal_places=2)
    total_amount = serializers.DecimalField(source="total.amount", max_digits=12, decimal_places=2)
    payment_status = serializers.CharField(source="payment_status.value")
    payment_ref = serializers.CharField(allow_null=True)
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()


class CreateOrderSerializer(serializers.Serializer):
    """Input for POST /api/orders."""

    event_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1, max_value=MAX_TICKETS_PER_ORDER)


class TicketSerializer(serializers.Serializer):
    """Serializer for Ticket domain model."""

    id = serializers.UUIDField(source="id.value")
    order_id = serializers.UUIDField(source="order_id.value")
    event_id = serializers.UUIDField(source="event_id.value")
    code = serializers.CharField(source="code.value")
    qr_file = serializers.CharField()
    pdf_file = serializers.CharField()
    issued_at = serializers.DateTimeField()
    is_used = serializers.BooleanField()
    used_at = serializers.DateTimeField(allow_null=True)


class TicketCheckSerializer(serializers.Serializer):
    status = serializers.CharField(source="status.value")
    ticket = TicketSerializer(allow_null=True)


class NotificationSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    type = serializers.CharField(source="type.value")
    subject = serializers.CharField()
    status = serializers.CharField(source="status.value")
    created_at = serializers.DateTimeField()


class PaymentWebhookSerializer(serializers.Serializer):
    """Provider invoice callback. Only ``external_id`` is required.

    The other fields accept any JSON value; values that are not strings are
    treated as absent, so an odd ``status`` is handled as an unknown status.
    """

    id = serializers.JSONField(required=False, allow_null=True, default=None)
    external_id = serializers.CharField(allow_blank=False, trim_whitespace=True)
    status = serializers.JSONField(required=False, allow_null=True, default=None)
    payment_method = serializers.JSONField(required=False, allow_null=True, default=None)
    paid_at = serializers.JSONField(required=False, allow_null=True, default=None)
