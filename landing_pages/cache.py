"""
Cache of rendered public landing pages.

One entry per resource, keyed ``landing_page.{resource_id}``. Entries are only
written for published pages requested without a preview token and are evicted
by every update or delete; that eviction is the only thing keeping them fresh.
"""
import logging

from django.conf import settings
from django.core.cache import caches

logger = logging.getLogger(__name__)

CACHE_KEY_TEMPLATE = 'landing_page.{resource_id}'


def cache_key(resource_id):
    return CACHE_KEY_TEMPLATE.format(resource_id=resource_id)


class LandingPageCache:
    """Thin wrapper around a Django cache backend (``get``/``set``/``delete``)."""

    def __init__(self, backend=None, timeout=None):
        self._backend = backend
        self._timeout = timeout

    @property
    def backend(self):
        return self._backend if self._backend is not None else caches['default']

    @property
    def timeout(self):
        return self._timeout if self._timeout is not None else settings.LANDING_PAGE_CACHE_TIMEOUT

    def get(self, resource_id):
        return self.backend.get(cache_key(resource_id))

    def set(self, resource_id, payload):
        self.backend.set(cache_key(resource_id), payload, self.timeout)

    def get_or_render(self, landing_page, render):
        """Return the cached payload for the page's resource, rendering and storing it on a miss."""
        payload = self.get(landing_page.resource_id)
        if payload is not None:
            logger.debug("Landing page cache hit for resource %s", landing_page.resource_id)
            return payload

        logger.debug("Landing page cache miss for resource %s", landing_page.resource_id)
        payload = render(landing_page)
        self.set(landing_page.resource_id, payload)
        return payload

    def invalidate(self, resource_id):
        self.backend.delete(cache_key(resource_id))
        logger.debug("Landing page cache evicted for resource %s", resource_id)


landing_page_cache = LandingPageCache()
