"""Read and interest operations exposed to the HTTP layer."""
import logging
from typing import Iterable, List, Optional, Union

from fetcher.event_fetcher import CachedEventFetcher, DirectEventFetcher
from processor.models import EnrichedEvent, InterestStats, STATUS_PAST
from source.errors import UpstreamUnavailable
from storage.event_cache import EventCache
from storage.interest_store import InterestStore

logger = logging.getLogger(__name__)


class EventsUnavailable(Exception):
    """No events could be produced, fresh or cached."""


def filter_events(
    events: Iterable[EnrichedEvent],
    event_type: Optional[str] = None
) -> List[EnrichedEvent]:
    """
    Keep events of the requested type that are not past.

    Args:
        events: Enriched events
        event_type: Type code to keep (case-insensitive), or None for all

    Returns:
        Filtered list in the original order
    """
    wanted = (event_type or '').strip().lower()
    return [
        event for event in events
        if (not wanted or event.type == wanted)
        and event.status.code != STATUS_PAST
    ]


class EventsApi:
    """Boundary between the routing layer and the events pipeline."""

    def __init__(
        self,
        fetcher: Union[CachedEventFetcher, DirectEventFetcher],
        cache: EventCache,
        interest_store: InterestStore
    ):
        self.fetcher = fetcher
        self.cache = cache
        self.interest_store = interest_store

    def list_events(
        self,
        event_type: Optional[str] = None,
        force_refresh: bool = False
    ) -> List[EnrichedEvent]:
        """
        Return current, non-past events, optionally of one type.

        Falls back to the last cached events when upstream is unavailable.

        Args:
            event_type: Type filter, case-insensitive
            force_refresh: Bypass the cache freshness window

        Returns:
            Filtered list of EnrichedEvent objects

        Raises:
            EventsUnavailable: If upstream failed and nothing is cached
        """
        try:
            events = self.fetcher.get_events(force_refresh=force_refresh)
        except UpstreamUnavailable as e:
            logger.error(
                f"Failed to fetch events: {e}",
                extra={'error_type': type(e).__name__,
                       'status_code': e.status_code}
            )
            cached = self.cache.events
            if cached is None:
                raise EventsUnavailable("Failed to load events") from e
            logger.info("Returning cached events due to error")
            events = cached

        return filter_events(events, event_type)

    def register_interest(self, event_id: str, action: str) -> InterestStats:
        """
        Record a going/interested action for an event.

        Raises:
            InvalidAction: If the action is not recognized
        """
        return self.interest_store.increment(event_id, action)
