"""Tests for cache behavior.

Run with: pytest tests/test_cache.py -v
"""

import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

from ticketing.signals import EVENT_LIST_CACHE_KEY, event_detail_cache_key


@pytest.mark.django_db
class TestCatalogCaching:
    def test_list_response_is_cached(self, api_client: APIClient, published_event):
        api_client.get("/api/events")

        cached = cache.get(EVENT_LIST_CACHE_KEY)
        assert [e["id"] for e in cached] == [str(published_event.id)]

    def test_cached_list_is_served(self, api_client: APIClient, published_event):
        """Given cached data, returns from cache."""
        cache.set(EVENT_LIST_CACHE_KEY, [{"id": "from-cache"}])

        assert api_client.get("/api/events").json() == [{"id": "from-cache"}]

    def test_errors_are_not_cached(self, api_client: APIClient):
        api_client.get("/api/events/not-a-uuid")
        assert cache.get(event_detail_cache_key("not-a-uuid")) is None


@pytest.mark.django_db
class TestCacheInvalidation:
    """Tests for cache invalidation on model changes."""

    def test_event_save_invalidates_list_cache(self, api_client: APIClient, published_event):
        """Saving an event invalidates the events:list cache key."""
        api_client.get("/api/events")
        published_event.title = "Jazz Night Extended"
        published_event.save()

        assert cache.get(EVENT_LIST_CACHE_KEY) is None
        assert api_client.get("/api/events").json()[0]["title"] == "Jazz Night Extended"

    def test_event_save_invalidates_detail_cache(self, api_client: APIClient, published_event):
        """Saving an event invalidates the events:{id} cache key."""
        api_client.get(f"/api/events/{published_event.id}")
        assert cache.get(event_detail_cache_key(published_event.id)) is not None

        published_event.save()

        assert cache.get(event_detail_cache_key(published_event.id)) is None

    def test_event_delete_invalidates_caches(self, api_client: APIClient, published_event):
        event_id = published_event.id
        api_client.get("/api/events")
        api_client.get(f"/api/events/{event_id}")

        published_event.delete()

        assert cache.get(EVENT_LIST_CACHE_KEY) is None
        assert cache.get(event_detail_cache_key(event_id)) is None
