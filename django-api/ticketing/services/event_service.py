"""Event service - catalog browsing.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors
"""

from ticketing.domain import Event, EventId
from ticketing.domain.errors import EventNotFoundError, InvalidEventIdError
from ticketing.stores.interfaces import EventStore


def parse_event_id(event_id: str) -> EventId:
    try:
        return EventId.from_string(event_id)
    except (TypeError, ValueError, AttributeError) as exc:
        raise InvalidEventIdError() from exc


class EventService:
    """Service for event catalog operations."""

    def __init__(self, store: EventStore) -> None:
        self._store = store

    def list_events(self) -> list[Event]:
        """Return all published events."""
        return self._store.list_published_events()

    def get_event(self, event_id: str) -> Event:
        """Return a published event by ID.

        Raises:
            InvalidEventIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist or is unpublished.
        """
        return self.get_purchasable_event(parse_event_id(event_id))

    def get_purchasable_event(self, event_id: EventId) -> Event:
        event = self._store.get_event(event_id)
        if event is None or not event.is_published:
            raise EventNotFoundError()
        return event
