"""Fixed demonstration events used when no Discord credentials are set."""
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional

from processor.models import RawEvent
from source.base import EventSource

logger = logging.getLogger(__name__)

PLACEHOLDER_LINK = '#'


class DemoEventSource(EventSource):
    """Serves two sample events scheduled relative to the current time."""

    name = "demo"

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        """
        Args:
            clock: Returns the current time; defaults to UTC now
        """
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def fetch_events(self) -> List[RawEvent]:
        now = self.clock()
        logger.debug("Serving demonstration events")
        return [
            RawEvent(
                id='1',
                name='Street Session: Downtown Vibes #IRL #DNB',
                description=(
                    'Open DJ set in the city center.\n#IRL #DNB\n'
                    'https://hpsbassline.myftp.biz/'
                ),
                scheduled_start_time=(now + timedelta(minutes=30)).isoformat(),
                scheduled_end_time=(now + timedelta(hours=2)).isoformat(),
                location='Haapsalu',
                image='https://images.pexels.com/photos/1190298/pexels-photo-1190298.jpeg'
            ),
            RawEvent(
                id='2',
                name='VR Club Showcase #VR #HARDCORE',
                description=(
                    'Immersive VR experience.\n#VR #HARDCORE\n'
                    'https://twitch.tv/hps_bassline'
                ),
                scheduled_start_time=(now + timedelta(hours=3)).isoformat(),
                scheduled_end_time=None,
                location='VRChat',
                image='https://images.pexels.com/photos/3404200/pexels-photo-3404200.jpeg'
            ),
        ]

    def image_url(self, event: RawEvent) -> Optional[str]:
        # Fixture images are already absolute
        return event.image

    def event_link(self, event: RawEvent) -> str:
        return PLACEHOLDER_LINK
