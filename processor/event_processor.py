"""Event processor for enriching raw scheduled events."""
import logging
from datetime import datetime
from typing import List, Optional

from processor.classifier import detect_type
from processor.models import EnrichedEvent, RawEvent
from processor.status import resolve_status
from processor.text_extractor import extract_links_and_tags
from source.base import EventSource
from storage.interest_store import InterestStore

logger = logging.getLogger(__name__)


class EventProcessor:
    """Turns raw upstream events into enriched events."""

    def __init__(self, interest_store: InterestStore):
        """
        Args:
            interest_store: Store providing live interest counters
        """
        self.interest_store = interest_store

    def process_events(
        self,
        raw_events: List[RawEvent],
        source: EventSource,
        now: Optional[datetime] = None
    ) -> List[EnrichedEvent]:
        """
        Enrich every raw event, keeping upstream order.

        Args:
            raw_events: Raw events from a source
            source: Source the events came from, used for image and link URLs
            now: Reference time for status, defaults to the current time

        Returns:
            List of EnrichedEvent objects, one per raw event
        """
        processed_events = [
            self.process_event(event, source, now=now) for event in raw_events
        ]
        logger.info(
            f"Processed {len(processed_events)} events from {source.name} source"
        )
        return processed_events

    def process_event(
        self,
        event: RawEvent,
        source: EventSource,
        now: Optional[datetime] = None
    ) -> EnrichedEvent:
        """
        Enrich a single event.

        Missing optional fields are passed through as None; this never
        rejects an event.

        Args:
            event: Raw event
            source: Source the event came from
            now: Reference time for status

        Returns:
            EnrichedEvent object
        """
        extracted = extract_links_and_tags(event.description)

        return EnrichedEvent(
            id=event.id,
            name=event.name,
            description=event.description,
            image=source.image_url(event),
            start=event.scheduled_start_time,
            end=event.scheduled_end_time,
            type=detect_type(event.name, event.description),
            location=event.location,
            link=source.event_link(event),
            links=extracted.links,
            tags=extracted.tags,
            status=resolve_status(
                event.scheduled_start_time,
                event.scheduled_end_time,
                now=now
            ),
            stats=self.interest_store.get(event.id)
        )
