"""Temporal status of an event relative to the current time."""
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from processor.models import (
    EventStatus,
    STATUS_LIVE,
    STATUS_PAST,
    STATUS_UPCOMING,
)

logger = logging.getLogger(__name__)

DEFAULT_DURATION = timedelta(hours=3)

UPCOMING = EventStatus(code=STATUS_UPCOMING, label='Upcoming')
LIVE = EventStatus(code=STATUS_LIVE, label='Live')
PAST = EventStatus(code=STATUS_PAST, label='Past')


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO 8601 timestamp.

    Args:
        value: Timestamp string, may be None

    Returns:
        Timezone-aware datetime (UTC assumed when no offset is given) or
        None if the value is missing or malformed
    """
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except (TypeError, ValueError):
        logger.warning(f"Ignoring malformed timestamp: {value!r}")
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def resolve_status(
    start: Optional[str],
    end: Optional[str],
    now: Optional[datetime] = None
) -> EventStatus:
    """
    Work out whether an event is upcoming, live or past.

    An event without an end time is assumed to last three hours. Both
    bounds are inclusive for "live".

    Args:
        start: ISO 8601 start timestamp
        end: ISO 8601 end timestamp
        now: Reference time, defaults to the current UTC time

    Returns:
        EventStatus for the given reference time
    """
    # Unparseable timestamps count as absent rather than making the event past
    start_at = parse_timestamp(start)
    if start_at is None:
        return UPCOMING

    end_at = parse_timestamp(end) or start_at + DEFAULT_DURATION
    now = now or datetime.now(timezone.utc)

    if now < start_at:
        return UPCOMING
    if now <= end_at:
        return LIVE
    return PAST
