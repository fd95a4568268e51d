"""Order creation and order queries."""

import logging

from ticketing.domain import Attendee, Order, OrderId, PlacedOrder, Quantity
from ticketing.domain.errors import InvalidOrderIdError, OrderNotFoundError, PaymentProviderError
from ticketing.gateways.interfaces import InvoiceRequest, PaymentGateway
from ticketing.services.event_service import EventService, parse_event_id
from ticketing.services.notifier import Notifier
from ticketing.stores.interfaces import OrderStore

logger = logging.getLogger(__name__)


def parse_order_id(order_id: str) -> OrderId:
    try:
        return OrderId.from_string(order_id)
    except (TypeError, ValueError, AttributeError) as exc:
        raise InvalidOrderIdError() from exc


class OrderService:
    """Places orders and hands them to the payment provider."""

    def __init__(
        self,
        orders: OrderStore,
        events: EventService,
        gateway: PaymentGateway,
        notifier: Notifier,
        frontend_url: str,
    ) -> None:
        self._orders = orders
        self._events = events
        self._gateway = gateway
        self._notifier = notifier
        self._frontend_url = frontend_url.rstrip("/")

    def create_order(self, buyer: Attendee, event_id: str, quantity: int) -> PlacedOrder:
        """Create a PENDING order and its provider invoice.

        The order is persisted before the invoice is requested so the
        provider can reference it. If the provider call fails in any way
        the order is deleted again.

        Raises:
            InvalidEventIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event is absent or unpublished.
            PaymentProviderError: If the invoice could not be created.
        """
        event = self._events.get_purchasable_event(parse_event_id(event_id))
        order = self._orders.create_order(Order.place(buyer, event, Quantity(quantity)))
        logger.info("Saved order %s for event %s (total %s)", order.id, event.id, order.total)

        invoice_request = InvoiceRequest(
            external_id=str(order.id),
            payer_email=buyer.email,
            description=f"Purchase of {quantity} ticket(s) for {event.title}",
            amount=order.total.amount,
            success_redirect_url=f"{self._frontend_url}/payment/success?orderId={order.id}",
            failure_redirect_url=f"{self._frontend_url}/payment/failed?orderId={order.id}",
        )
        try:
            invoice = self._gateway.create_invoice(invoice_request)
        except PaymentProviderError:
            self._orders.delete_order(order.id)
            logger.warning("Deleted order %s after invoice creation failed", order.id)
            raise
        except Exception as exc:
            self._orders.delete_order(order.id)
            logger.exception("Deleted order %s after unexpected gateway error", order.id)
            raise PaymentProviderError() from exc

        order = self._orders.set_payment_ref(order.id, invoice.id)
        logger.info("Order %s created with invoice %s", order.id, invoice.id)

        try:
            self._notifier.schedule_order_expiry(order, invoice.expiry_date)
        except Exception:
            logger.exception("Could not schedule expiry for order %s", order.id)

        return PlacedOrder(order=order, invoice_url=invoice.invoice_url)

    def list_orders(self, buyer: Attendee) -> list[Order]:
        return self._orders.list_orders_for_buyer(buyer.id)

    def get_order(self, buyer: Attendee, order_id: str) -> Order:
        """Return one of the buyer's orders.

        Raises:
            InvalidOrderIdError: If the order_id is not a valid UUID.
            OrderNotFoundError: If absent or owned by another buyer.
        """
        order = self._orders.get_order(parse_order_id(order_id))
        if order is None or order.buyer.id != buyer.id:
            raise OrderNotFoundError()
        return order
