"""Unit tests for DiscordEventsClient."""
import pytest
import responses
from requests.exceptions import ConnectionError, Timeout

from processor.models import RawEvent
from source.discord_client import DiscordEventsClient
from source.errors import RateLimitedError, UpstreamUnavailable

EVENTS_URL = 'https://discord.com/api/v10/guilds/987/scheduled-events'


@pytest.fixture
def client():
    return DiscordEventsClient(guild_id='987', token='test-token', timeout=5)


class TestDiscordEventsClient:
    """Test cases for DiscordEventsClient class."""

    @responses.activate
    def test_fetch_events_success(self, client):
        """Test successful fetch and parsing of scheduled events."""
        responses.add(
            responses.GET,
            EVENTS_URL,
            json=[
                {
                    'id': '1',
                    'name': 'Street Session #IRL',
                    'description': 'Open air #DNB',
                    'scheduled_start_time': '2024-06-01T19:00:00+00:00',
                    'scheduled_end_time': '2024-06-01T22:00:00+00:00',
                    'entity_metadata': {'location': 'Haapsalu'},
                    'image': 'imghash'
                },
                {
                    'id': '2',
                    'name': 'Voice stage',
                    'scheduled_start_time': '2024-06-02T19:00:00+00:00',
                    'entity_metadata': None,
                    'image': None
                }
            ],
            status=200
        )

        events = client.fetch_events()

        assert len(events) == 2
        assert events[0] == RawEvent(
            id='1',
            name='Street Session #IRL',
            description='Open air #DNB',
            scheduled_start_time='2024-06-01T19:00:00+00:00',
            scheduled_end_time='2024-06-01T22:00:00+00:00',
            location='Haapsalu',
            image='imghash'
        )
        assert events[1].description is None
        assert events[1].location is None
        assert events[1].image is None

        # Single request with bot authentication
        assert len(responses.calls) == 1
        assert responses.calls[0].request.headers['Authorization'] == 'Bot test-token'

    @responses.activate
    def test_rate_limited(self, client):
        """Test that HTTP 429 raises RateLimitedError with the advisory body."""
        responses.add(
            responses.GET,
            EVENTS_URL,
            json={'message': 'You are being rate limited.', 'retry_after': 1.5},
            status=429
        )

        with pytest.raises(RateLimitedError) as exc_info:
            client.fetch_events()

        assert exc_info.value.status_code == 429
        assert exc_info.value.payload['retry_after'] == 1.5
        assert isinstance(exc_info.value, UpstreamUnavailable)
        # No retry is attempted
        assert len(responses.calls) == 1

    @responses.activate
    def test_rate_limited_with_invalid_body(self, client):
        """Test that an undecodable rate-limit body is tolerated."""
        responses.add(responses.GET, EVENTS_URL, body='slow down', status=429)

        with pytest.raises(RateLimitedError) as exc_info:
            client.fetch_events()

        assert exc_info.value.payload == {}

    @responses.activate
    def test_error_response(self, client):
        """Test that non-success responses raise UpstreamUnavailable."""
        responses.add(
            responses.GET,
            EVENTS_URL,
            json={'message': 'Missing Access', 'code': 50001},
            status=403
        )

        with pytest.raises(UpstreamUnavailable) as exc_info:
            client.fetch_events()

        assert not isinstance(exc_info.value, RateLimitedError)
        assert exc_info.value.status_code == 403

    @responses.activate
    @pytest.mark.parametrize('error', [
        Timeout('Request timed out'),
        ConnectionError('Connection refused'),
    ])
    def test_transport_failure(self, client, error):
        """Test that timeouts and connection errors raise UpstreamUnavailable."""
        responses.add(responses.GET, EVENTS_URL, body=error)

        with pytest.raises(UpstreamUnavailable):
            client.fetch_events()

    @responses.activate
    def test_invalid_json(self, client):
        """Test that an undecodable success body raises UpstreamUnavailable."""
        responses.add(responses.GET, EVENTS_URL, body='<html>', status=200)

        with pytest.raises(UpstreamUnavailable):
            client.fetch_events()

    @responses.activate
    def test_unexpected_payload_type(self, client):
        """Test that a non-list payload raises UpstreamUnavailable."""
        responses.add(responses.GET, EVENTS_URL, json={'events': []}, status=200)

        with pytest.raises(UpstreamUnavailable):
            client.fetch_events()

    def test_image_url(self, client):
        """Test CDN image URL construction."""
        raw = RawEvent(
            id='55', name='x', description=None, scheduled_start_time=None,
            scheduled_end_time=None, location=None, image='cover'
        )

        assert client.image_url(raw) == (
            'https://cdn.discordapp.com/guild-events/55/cover.webp?size=1024'
        )
        raw.image = None
        assert client.image_url(raw) is None

    def test_event_link(self, client):
        """Test deep link construction."""
        raw = RawEvent(
            id='55', name='x', description=None, scheduled_start_time=None,
            scheduled_end_time=None, location=None, image=None
        )

        assert client.event_link(raw) == 'https://discord.com/events/987/55'

    def test_custom_api_base(self):
        """Test that the API base URL can be overridden."""
        client = DiscordEventsClient(
            guild_id='1', token='t', api_base='http://localhost:8080/api/'
        )

        assert client.events_url == 'http://localhost:8080/api/guilds/1/scheduled-events'
