"""Pytest configuration and shared fixtures."""

import uuid
from datetime import timedelta
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from django.utils import timezone
from rest_framework.test import APIClient

from ticketing import dependencies, models
from tests.fakes import FakePaymentGateway

WEBHOOK_TOKEN = "test-callback-token"


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture(autouse=True)
def artifact_dir(settings, tmp_path):
    path = tmp_path / "uploads"
    settings.TICKET_ARTIFACT_DIR = path
    return path


@pytest.fixture
def user(db):
    return get_user_model().objects.create_user(
        username="buyer",
        email="buyer@example.com",
        password="pass12345",
        first_name="Budi",
        last_name="Santoso",
    )


@pytest.fixture
def other_user(db):
    return get_user_model().objects.create_user(
        username="other", email="other@example.com", password="pass12345"
    )


@pytest.fixture
def staff_user(db):
    return get_user_model().objects.create_user(
        username="gate", email="gate@example.com", password="pass12345", is_staff=True
    )


@pytest.fixture
def auth_client(api_client: APIClient, user) -> APIClient:
    api_client.force_authenticate(user=user)
    return api_client


@pytest.fixture
def event_factory(db):
    def create(**overrides) -> models.Event:
        starts_at = overrides.pop("starts_at", timezone.now() + timedelta(days=7))
        fields = {
            "title": "Jazz Night",
            "description": "An evening of live jazz.",
            "location": "Jakarta Convention Center",
            "starts_at": starts_at,
            "ends_at": starts_at + timedelta(hours=3),
            "price": Decimal("50000.00"),
            "is_published": True,
        }
        fields.update(overrides)
        return models.Event.objects.create(**fields)

    return create


@pytest.fixture
def published_event(event_factory) -> models.Event:
    return event_factory()


@pytest.fixture
def order_factory(db, user, published_event):
    def create(**overrides) -> models.Order:
        event = overrides.pop("event", published_event)
        quantity = overrides.pop("quantity", 2)
        fields = {
            "id": uuid.uuid4(),
            "buyer": user,
            "event": event,
            "quantity": quantity,
            "unit_price": event.price,
            "total_amount": event.price * quantity,
            "payment_status": models.Order.PaymentStatus.PENDING,
            "payment_ref": "inv-existing",
        }
        fields.update(overrides)
        return models.Order.objects.create(**fields)

    return create


@pytest.fixture
def pending_order(order_factory) -> models.Order:
    return order_factory()


@pytest.fixture
def paid_order(order_factory) -> models.Order:
    return order_factory(payment_status=models.Order.PaymentStatus.PAID)


@pytest.fixture
def gateway(monkeypatch) -> FakePaymentGateway:
    fake = FakePaymentGateway()
    monkeypatch.setattr(dependencies, "build_payment_gateway", lambda: fake)
    return fake


@pytest.fixture
def webhook(api_client: APIClient):
    """Post a provider callback with the configured token."""

    def send(payload: dict, token: str | None = WEBHOOK_TOKEN):
        headers = {"HTTP_X_CALLBACK_TOKEN": token} if token is not None else {}
        return api_client.post("/api/payments/webhook", payload, format="json", **headers)

    return send
