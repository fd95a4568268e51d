"""Django signals for catalog cache invalidation."""

from django.core.cache import cache
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from ticketing.models import Event

EVENT_LIST_CACHE_KEY = "events:list"


def event_detail_cache_key(event_id) -> str:
    return f"events:{event_id}"


@receiver([post_save, post_delete], sender=Event)
def invalidate_event_cache(sender, instance, **kwargs):
    """Invalidate caches when an event is saved or deleted."""
    cache.delete_many([EVENT_LIST_CACHE_KEY, event_detail_cache_key(instance.pk)])
