"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses
- Never contain business logic
- Never expose internal error details
"""

from django.conf import settings
from django.core.cache import cache
from django.http import FileResponse
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAdminUser
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from ticketing import dependencies
from ticketing.domain import TicketCheckResult, TicketCheckStatus
from ticketing.domain.errors import DomainError, ErrorCode
from ticketing.handlers.serializers import (
    CreateOrderSerializer,
    EventSerializer,
    NotificationSerializer,
    OrderSerializer,
    TicketCheckSerializer,
    TicketSerializer,
)
from ticketing.signals import EVENT_LIST_CACHE_KEY, event_detail_cache_key

ERROR_STATUS = {
    ErrorCode.INVALID_EVENT_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_ORDER_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.EVENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.ORDER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.TICKET_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.PAYMENT_PROVIDER_FAILED: status.HTTP_502_BAD_GATEWAY,
}

CHECK_STATUS = {
    TicketCheckStatus.VALID: status.HTTP_200_OK,
    TicketCheckStatus.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    TicketCheckStatus.NOT_OWNED: status.HTTP_403_FORBIDDEN,
    TicketCheckStatus.INVALID_STATE: status.HTTP_409_CONFLICT,
    TicketCheckStatus.ALREADY_USED: status.HTTP_409_CONFLICT,
}


def error_response(error: DomainError) -> Response:
    return Response(
        {"error": {"code": error.code.value, "message": error.message}},
        status=ERROR_STATUS.get(error.code, status.HTTP_500_INTERNAL_SERVER_ERROR),
    )


def check_response(result: TicketCheckResult) -> Response:
    return Response(TicketCheckSerializer(result).data, status=CHECK_STATUS[result.status])


class EventListView(APIView):
    """Handler for GET /api/events"""

    permission_classes = [AllowAny]

    def get(self, request: Request) -> Response:
        data = cache.get(EVENT_LIST_CACHE_KEY)
        if data is None:
            events = dependencies.build_event_service().list_events()
            data = list(EventSerializer(events, many=True).data)
            cache.set(EVENT_LIST_CACHE_KEY, data, settings.EVENT_CATALOG_CACHE_SECONDS)
        return Response(data)


class EventDetailView(APIView):
    """Handler for GET /api/events/{event_id}"""

    permission_classes = [AllowAny]

    def get(self, request: Request, event_id: str) -> Response:
        key = event_detail_cache_key(event_id)
        data = cache.get(key)
        if data is None:
            try:
                event = dependencies.build_event_service().get_event(event_id)
            except DomainError as e:
                return error_response(e)
            data = dict(EventSerializer(event).data)
            cache.set(key, data, settings.EVENT_CATALOG_CACHE_SECONDS)
        return Response(data)


class OrderListView(APIView):
    """Handler for GET/POST /api/orders"""

    def get(self, request: Request) -> Response:
        service = dependencies.build_order_service()
        orders = service.list_orders(dependencies.current_attendee(request))
        return Response(OrderSerializer(orders, many=True).data)

    def post(self, request: Request) -> Response:
        serializer = CreateOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        service = dependencies.build_order_service()
        try:
            placed = service.create_order(
                buyer=dependencies.current_attendee(request),
                event_id=str(serializer.validated_data["event_id"]),
                quantity=serializer.validated_data["quantity"],
            )
        except DomainError as e:
            return error_response(e)
        data = {**OrderSerializer(placed.order).data, "invoice_url": placed.invoice_url}
        return Response(data, status=status.HTTP_201_CREATED)


class OrderDetailView(APIView):
    """Handler for GET /api/orders/{order_id}"""

    def get(self, request: Request, order_id: str) -> Response:
        service = dependencies.build_order_service()
        try:
            order = service.get_order(dependencies.current_attendee(request), order_id)
        except DomainError as e:
            return error_response(e)
        return Response(OrderSerializer(order).data)


class OrderTicketListView(APIView):
    """Handler for GET /api/orders/{order_id}/tickets"""

    def get(self, request: Request, order_id: str) -> Response:
        service = dependencies.build_ticket_service()
        try:
            tickets = service.list_tickets_for_order(dependencies.current_attendee(request), order_id)
        except DomainError as e:
            return error_response(e)
        return Response(TicketSerializer(tickets, many=True).data)


class TicketListView(APIView):
    """Handler for GET /api/tickets"""

    def get(self, request: Request) -> Response:
        tickets = dependencies.build_ticket_service().list_tickets(dependencies.current_attendee(request))
        return Response(TicketSerializer(tickets, many=True).data)


class TicketCheckView(APIView):
    """Handler for GET /api/tickets/{code}/check"""

    def get(self, request: Request, code: str) -> Response:
        result = dependencies.build_ticket_service().check_ticket(
            code, user_id=request.user.pk, is_staff=request.user.is_staff
        )
        return check_response(result)


class TicketRedeemView(APIView):
    """Handler for POST /api/admin/tickets/{code}/redeem"""

    permission_classes = [IsAdminUser]

    def post(self, request: Request, code: str) -> Response:
        return check_response(dependencies.build_ticket_service().redeem_ticket(code))


class TicketQRView(APIView):
    """Handler for GET /api/tickets/{code}/qr"""

    def get(self, request: Request, code: str):
        service = dependencies.build_ticket_service()
        try:
            path = service.get_qr_path(code, user_id=request.user.pk, is_staff=request.user.is_staff)
        except DomainError as e:
            return error_response(e)
        return FileResponse(path.open("rb"), content_type="image/png")


class TicketPDFView(APIView):
    """Handler for GET /api/tickets/{code}/pdf and /api/tickets/{code}/download"""

    as_attachment = False

    def get(self, request: Request, code: str):
        service = dependencies.build_ticket_service()
        try:
            path = service.get_pdf_path(code, user_id=request.user.pk, is_staff=request.user.is_staff)
        except DomainError as e:
            return error_response(e)
        return FileResponse(
            path.open("rb"),
            content_type="application/pdf",
            as_attachment=self.as_attachment,
            filename=path.name,
        )


class NotificationListView(APIView):
    """Handler for GET /api/notifications"""

    def get(self, request: Request) -> Response:
        notifications = dependencies.build_notifier().list_notifications(request.user.pk)
        return Response(NotificationSerializer(notifications, many=True).data)
