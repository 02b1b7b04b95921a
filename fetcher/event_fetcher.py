"""Fetchers producing the current list of enriched events."""
import logging
import time
from typing import Callable, List

from processor.event_processor import EventProcessor
from processor.models import EnrichedEvent
from source.base import EventSource
from source.errors import RateLimitedError
from storage.event_cache import EventCache

logger = logging.getLogger(__name__)


class CachedEventFetcher:
    """
    Serves events from a short-lived cache in front of an upstream source.

    A rate-limited refresh falls back to the cached list of any age. Other
    upstream failures are raised as UpstreamUnavailable for the caller to
    handle.
    """

    DEFAULT_TTL_SECONDS = 15

    def __init__(
        self,
        source: EventSource,
        processor: EventProcessor,
        cache: EventCache,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time
    ):
        """
        Args:
            source: Upstream event source
            processor: Processor used to enrich raw events
            cache: Cache slot owned for the process lifetime
            ttl_seconds: Freshness window in seconds (default: 15)
            clock: Returns the current time in seconds
        """
        self.source = source
        self.processor = processor
        self.cache = cache
        self.ttl_seconds = ttl_seconds
        self.clock = clock

    def get_events(self, force_refresh: bool = False) -> List[EnrichedEvent]:
        """
        Return the current enriched events.

        Args:
            force_refresh: Skip the freshness check and call upstream

        Returns:
            List of EnrichedEvent objects

        Raises:
            UpstreamUnavailable: If upstream fails and no fallback applies
        """
        now = self.clock()

        if not force_refresh:
            cached = self.cache.get_fresh(now, self.ttl_seconds)
            if cached is not None:
                logger.debug("Serving events from cache")
                return cached

        try:
            raw_events = self.source.fetch_events()
        except RateLimitedError:
            stale = self.cache.events
            if stale is None:
                logger.error("Rate limited by upstream and no cache available")
                raise
            logger.info("Returning cached events after rate limit")
            return stale

        events = self.processor.process_events(raw_events, self.source)
        self.cache.store(events, now)
        return events


class DirectEventFetcher:
    """Enriches events from a source on every call, without caching."""

    def __init__(self, source: EventSource, processor: EventProcessor):
        self.source = source
        self.processor = processor

    def get_events(self, force_refresh: bool = False) -> List[EnrichedEvent]:
        return self.processor.process_events(self.source.fetch_events(), self.source)
