"""Common interface for event data sources."""
from abc import ABC, abstractmethod
from typing import List, Optional

from processor.models import RawEvent


class EventSource(ABC):
    """A provider of raw scheduled events."""

    name: str = ""

    @abstractmethod
    def fetch_events(self) -> List[RawEvent]:
        """
        Fetch the current list of raw events, in upstream order.

        Raises:
            UpstreamUnavailable: If the events cannot be retrieved
        """
        ...

    @abstractmethod
    def image_url(self, event: RawEvent) -> Optional[str]:
        """Return a fully-qualified image URL for ``event`` or None."""
        ...

    @abstractmethod
    def event_link(self, event: RawEvent) -> str:
        """Return the deep link to ``event`` on its source platform."""
        ...
