"""Unit tests for EventService and OrderService.

These test error handling and domain error mapping.
Run with: pytest tests/test_services.py -v
"""

from unittest.mock import Mock

import pytest

from ticketing.domain import EventId, Money, PaymentStatus
from ticketing.domain.errors import (
    EventNotFoundError,
    InvalidEventIdError,
    InvalidOrderIdError,
    OrderNotFoundError,
    PaymentProviderError,
)
from ticketing.services import EventService, OrderService
from ticketing.stores.interfaces import EventStore, OrderStore
from tests.fakes import FakePaymentGateway, make_attendee, make_event


class TestEventService:
    """Tests for EventService."""

    def test_get_event_invalid_id_raises_error(self):
        """get_event raises InvalidEventIdError for malformed UUID."""
        service = EventService(Mock(spec=EventStore))
        with pytest.raises(InvalidEventIdError):
            service.get_event("not-a-uuid")

    def test_get_event_not_found_raises_error(self):
        """get_event raises EventNotFoundError when store returns None."""
        store = Mock(spec=EventStore)
        store.get_event.return_value = None
        service = EventService(store)

        with pytest.raises(EventNotFoundError):
            service.get_event("6f1c2b5e-8d7a-4c3b-9e2f-1a0b9c8d7e6f")

    def test_get_event_unpublished_raises_error(self):
        """An unpublished event is indistinguishable from a missing one."""
        event = make_event(is_published=False)
        store = Mock(spec=EventStore)
        store.get_event.return_value = event

        with pytest.raises(EventNotFoundError):
            EventService(store).get_purchasable_event(event.id)

    def test_get_event_returns_published_event(self):
        event = make_event()
        store = Mock(spec=EventStore)
        store.get_event.return_value = event

        assert EventService(store).get_event(str(event.id)) == event
        store.get_event.assert_called_once_with(EventId(event.id.value))


class TestOrderService:
    """Tests for OrderService against mocked stores."""

    @pytest.fixture
    def event(self):
        return make_event(price=Money(50000))

    @pytest.fixture
    def orders(self):
        store = Mock(spec=OrderStore)
        store.create_order.side_effect = lambda order: order
        store.set_payment_ref.side_effect = lambda order_id, ref: store.create_order.call_args.args[0]
        return store

    def build(self, orders, event, gateway):
        events = Mock(spec=EventStore)
        events.get_event.return_value = event
        return OrderService(
            orders=orders,
            events=EventService(events),
            gateway=gateway,
            notifier=Mock(),
            frontend_url="http://frontend.test/",
        )

    def test_invoice_request_carries_order_total_and_redirects(self, orders, event):
        """The invoice references the order by id and charges its total."""
        gateway = FakePaymentGateway()
        placed = self.build(orders, event, gateway).create_order(make_attendee(), str(event.id), 2)

        request = gateway.requests[0]
        assert request.external_id == str(placed.order.id)
        assert request.amount == 100000
        assert request.payer_email == "buyer@example.com"
        assert request.success_redirect_url == f"http://frontend.test/payment/success?orderId={placed.order.id}"
        assert request.failure_redirect_url == f"http://frontend.test/payment/failed?orderId={placed.order.id}"
        assert placed.invoice_url == f"https://checkout.test/{placed.order.id}"
        orders.set_payment_ref.assert_called_once_with(placed.order.id, "inv-1")

    def test_gateway_failure_deletes_order(self, orders, event):
        """A failed invoice leaves no order behind."""
        service = self.build(orders, event, FakePaymentGateway(fail=True))

        with pytest.raises(PaymentProviderError):
            service.create_order(make_attendee(), str(event.id), 1)

        created = orders.create_order.call_args.args[0]
        orders.delete_order.assert_called_once_with(created.id)
        orders.set_payment_ref.assert_not_called()

    def test_unexpected_gateway_error_maps_to_provider_error(self, orders, event):
        gateway = Mock()
        gateway.create_invoice.side_effect = RuntimeError("boom")
        service = self.build(orders, event, gateway)

        with pytest.raises(PaymentProviderError):
            service.create_order(make_attendee(), str(event.id), 1)

        orders.delete_order.assert_called_once()

    def test_new_order_is_pending(self, orders, event):
        placed = self.build(orders, event, FakePaymentGateway()).create_order(
            make_attendee(), str(event.id), 1
        )
        assert placed.order.payment_status is PaymentStatus.PENDING

    def test_get_order_invalid_id_raises_error(self, orders, event):
        service = self.build(orders, event, FakePaymentGateway())
        with pytest.raises(InvalidOrderIdError):
            service.get_order(make_attendee(), "nope")

    def test_get_order_of_other_buyer_raises_not_found(self, orders, event):
        """Another buyer's order is reported as missing."""
        service = self.build(orders, event, FakePaymentGateway())
        placed = service.create_order(make_attendee(), str(event.id), 1)
        orders.get_order.return_value = placed.order

        with pytest.raises(OrderNotFoundError):
            service.get_order(make_attendee(id=99, email="x@example.com"), str(placed.order.id))
