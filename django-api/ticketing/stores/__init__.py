from ticketing.stores.django_store import (
    DjangoEventStore,
    DjangoNotificationStore,
    DjangoOrderStore,
    DjangoTicketStore,
)
from ticketing.stores.interfaces import EventStore, NotificationStore, OrderStore, TicketStore

__all__ = [
    "DjangoEventStore",
    "DjangoNotificationStore",
    "DjangoOrderStore",
    "DjangoTicketStore",
    "EventStore",
    "NotificationStore",
    "OrderStore",
    "TicketStore",
]
