"""In-memory going/interested counters per event."""
import logging
from typing import Dict

from processor.models import InterestStats

logger = logging.getLogger(__name__)

VALID_ACTIONS = ('going', 'interested')


class InvalidAction(ValueError):
    """Interest action is not one of VALID_ACTIONS."""


class InterestStore:
    """Keyed counter store; entries are created on first access."""

    def __init__(self):
        self._stats: Dict[str, InterestStats] = {}

    def get(self, event_id: str) -> InterestStats:
        """
        Return the live counters for an event, creating them at zero.

        The same object is returned on every call so enriched events keep
        reflecting later increments.
        """
        stats = self._stats.get(event_id)
        if stats is None:
            stats = InterestStats()
            self._stats[event_id] = stats
        return stats

    def increment(self, event_id: str, action: str) -> InterestStats:
        """
        Add one to the counter named by ``action``.

        Args:
            event_id: Event identifier
            action: "going" or "interested"

        Returns:
            Updated counters for the event

        Raises:
            InvalidAction: If the action is not recognized
        """
        if action not in VALID_ACTIONS:
            raise InvalidAction(f"Invalid action: {action!r}")

        stats = self.get(event_id)
        setattr(stats, action, getattr(stats, action) + 1)
        logger.info(
            f"Recorded '{action}' for event {event_id}",
            extra={'event_id': event_id, 'going': stats.going,
                   'interested': stats.interested}
        )
        return stats

    def __len__(self) -> int:
        return len(self._stats)
