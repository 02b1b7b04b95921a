"""Client for the Discord guild scheduled events API."""
import logging
from typing import Any, List, Optional

import requests

from processor.models import RawEvent
from source.base import EventSource
from source.errors import RateLimitedError, UpstreamUnavailable

logger = logging.getLogger(__name__)


class DiscordEventsClient(EventSource):
    """Fetches scheduled events of one guild from the Discord API."""

    name = "discord"

    API_BASE = "https://discord.com/api/v10"
    CDN_HOST = "cdn.discordapp.com"
    PLATFORM_HOST = "discord.com"
    IMAGE_SIZE = 1024
    RATE_LIMIT_STATUS = 429

    def __init__(
        self,
        guild_id: str,
        token: str,
        timeout: float = 10,
        api_base: Optional[str] = None,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize the events client.

        Args:
            guild_id: Discord guild (server) ID
            token: Bot token used for authentication
            timeout: HTTP request timeout in seconds (default: 10)
            api_base: Override of the API base URL
            session: Optional requests session to reuse connections
        """
        self.guild_id = guild_id
        self.token = token
        self.timeout = timeout
        self.api_base = (api_base or self.API_BASE).rstrip('/')
        self.session = session or requests.Session()

    @property
    def events_url(self) -> str:
        return f"{self.api_base}/guilds/{self.guild_id}/scheduled-events"

    def fetch_events(self) -> List[RawEvent]:
        """
        Fetch scheduled events with a single request.

        Returns:
            List of RawEvent objects in the order returned by Discord

        Raises:
            RateLimitedError: If Discord signals rate limiting
            UpstreamUnavailable: On any other error response, transport
                failure or undecodable payload
        """
        logger.info(f"Fetching scheduled events for guild {self.guild_id}")

        payload = self._request_events()
        events = self._parse_events(payload)

        logger.info(f"Successfully fetched {len(events)} events")
        return events

    def _request_events(self) -> Any:
        """
        Issue the GET request and decode the JSON body.

        Returns:
            Decoded JSON payload
        """
        try:
            response = self.session.get(
                self.events_url,
                headers={'Authorization': f"Bot {self.token}"},
                timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.error(f"Request to Discord API failed: {e}")
            raise UpstreamUnavailable(f"Discord API request failed: {e}") from e

        if response.status_code == self.RATE_LIMIT_STATUS:
            try:
                advisory = response.json()
            except ValueError:
                advisory = {}
            logger.warning(f"Discord API rate limited: {advisory}")
            raise RateLimitedError("Rate limited by Discord", payload=advisory)

        if not response.ok:
            logger.error(
                f"Discord API error ({response.status_code}): {response.text}"
            )
            raise UpstreamUnavailable(
                "Failed to fetch events from Discord",
                status_code=response.status_code
            )

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Discord API returned invalid JSON: {e}")
            raise UpstreamUnavailable(
                "Discord API returned invalid JSON",
                status_code=response.status_code
            ) from e

    def _parse_events(self, payload: Any) -> List[RawEvent]:
        """
        Convert the decoded payload into RawEvent objects.

        Args:
            payload: Decoded JSON body, expected to be a list of objects

        Returns:
            List of RawEvent objects
        """
        if not isinstance(payload, list):
            logger.error(
                f"Unexpected payload type from Discord API: {type(payload).__name__}"
            )
            raise UpstreamUnavailable("Unexpected payload from Discord API")

        return [RawEvent.from_dict(item) for item in payload if isinstance(item, dict)]

    def image_url(self, event: RawEvent) -> Optional[str]:
        if not event.image:
            return None
        return (
            f"https://{self.CDN_HOST}/guild-events/{event.id}/{event.image}.webp"
            f"?size={self.IMAGE_SIZE}"
        )

    def event_link(self, event: RawEvent) -> str:
        return f"https://{self.PLATFORM_HOST}/events/{self.guild_id}/{event.id}"
