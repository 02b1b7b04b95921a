"""In-memory single-slot cache for the last successful events fetch."""
import logging
from typing import List, Optional

from processor.models import CacheEntry, EnrichedEvent

logger = logging.getLogger(__name__)


class EventCache:
    """
    Holds the most recent enriched event list and its computation time.

    The entry is only ever replaced as a whole, so readers see either the
    previous or the new list, never a mix.
    """

    def __init__(self):
        self._entry: Optional[CacheEntry] = None

    @property
    def entry(self) -> Optional[CacheEntry]:
        return self._entry

    @property
    def events(self) -> Optional[List[EnrichedEvent]]:
        """Cached events of any age, or None if nothing was stored yet."""
        entry = self._entry
        return entry.events if entry else None

    def store(self, events: List[EnrichedEvent], stored_at: float) -> None:
        """
        Replace the cached entry.

        Args:
            events: Result of a successful fetch
            stored_at: Timestamp (seconds) the result was computed at
        """
        self._entry = CacheEntry(events=events, stored_at=stored_at)
        logger.debug(f"Cached {len(events)} events at {stored_at}")

    def get_fresh(self, now: float, ttl_seconds: float) -> Optional[List[EnrichedEvent]]:
        """
        Return cached events if they are younger than ``ttl_seconds``.

        Args:
            now: Current timestamp in seconds
            ttl_seconds: Freshness window

        Returns:
            Cached events or None when empty or expired
        """
        entry = self._entry
        if entry is None or now - entry.stored_at >= ttl_seconds:
            return None
        return entry.events
