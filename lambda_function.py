"""AWS Lambda handler for the guild events API."""
import json
import logging
import os
import re
import time
from dataclasses import dataclass
from typing import Dict, Any, Optional

from api.events_api import EventsApi, EventsUnavailable
from fetcher.event_fetcher import CachedEventFetcher, DirectEventFetcher
from processor.event_processor import EventProcessor
from source.demo_source import DemoEventSource
from source.discord_client import DiscordEventsClient
from storage.event_cache import EventCache
from storage.interest_store import InterestStore, InvalidAction


# LogRecord attributes that are not user-supplied extras
_RESERVED_LOG_ATTRS = set(vars(logging.makeLogRecord({}))) | {'message', 'asctime'}

EVENTS_PATH = '/api/events'
INTEREST_PATH = re.compile(r'^/api/events/(?P<event_id>[^/]+)/interest/?$')

_api: Optional[EventsApi] = None


# Configure JSON logging
class JsonFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            'timestamp': self.formatTime(record),
            'level': record.levelname,
            'message': record.getMessage(),
            'logger': record.name
        }

        for key, value in vars(record).items():
            if key not in _RESERVED_LOG_ATTRS:
                log_data[key] = value

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def setup_logging(log_level: str = 'INFO') -> None:
    """
    Configure logging with JSON formatter.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    root_logger = logging.getLogger()

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    root_logger.addHandler(handler)

    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))


@dataclass
class Settings:
    """Process configuration read from the environment."""
    guild_id: Optional[str]
    bot_token: Optional[str]
    log_level: str = 'INFO'
    timeout_seconds: float = 10
    cache_ttl_seconds: float = CachedEventFetcher.DEFAULT_TTL_SECONDS
    api_base: str = DiscordEventsClient.API_BASE

    @property
    def has_credentials(self) -> bool:
        return bool(self.guild_id and self.bot_token)


def load_settings() -> Settings:
    """Read configuration from environment variables."""
    return Settings(
        guild_id=os.environ.get('GUILD_ID') or None,
        bot_token=os.environ.get('DISCORD_BOT_TOKEN') or None,
        log_level=os.environ.get('LOG_LEVEL', 'INFO'),
        timeout_seconds=float(os.environ.get('TIMEOUT_SECONDS', '10')),
        cache_ttl_seconds=float(
            os.environ.get(
                'CACHE_TTL_SECONDS', str(CachedEventFetcher.DEFAULT_TTL_SECONDS)
            )
        ),
        api_base=os.environ.get('DISCORD_API_BASE', DiscordEventsClient.API_BASE)
    )


def build_api(settings: Settings) -> EventsApi:
    """
    Wire the events pipeline with fresh process-lifetime stores.

    Args:
        settings: Process configuration

    Returns:
        EventsApi ready to serve requests
    """
    logger = logging.getLogger(__name__)
    cache = EventCache()
    interest_store = InterestStore()
    processor = EventProcessor(interest_store)

    if settings.has_credentials:
        source = DiscordEventsClient(
            guild_id=settings.guild_id,
            token=settings.bot_token,
            timeout=settings.timeout_seconds,
            api_base=settings.api_base
        )
        fetcher = CachedEventFetcher(
            source=source,
            processor=processor,
            cache=cache,
            ttl_seconds=settings.cache_ttl_seconds
        )
    else:
        logger.warning("No GUILD_ID or DISCORD_BOT_TOKEN, using demo data")
        fetcher = DirectEventFetcher(DemoEventSource(), processor)

    return EventsApi(fetcher=fetcher, cache=cache, interest_store=interest_store)


def get_api() -> EventsApi:
    """Return the EventsApi of this process, building it on first use."""
    global _api
    if _api is None:
        settings = load_settings()
        setup_logging(settings.log_level)
        _api = build_api(settings)
    return _api


def _response(status_code: int, body: Any) -> Dict[str, Any]:
    return {
        'statusCode': status_code,
        'headers': {'Content-Type': 'application/json'},
        'body': json.dumps(body)
    }


def _parse_body(event: Dict[str, Any]) -> Dict[str, Any]:
    """Decode a JSON request body, returning {} when absent or invalid."""
    body = event.get('body')
    if not body:
        return {}
    try:
        data = json.loads(body)
    except (TypeError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def handle_request(event: Dict[str, Any], api: EventsApi) -> Dict[str, Any]:
    """
    Route an API Gateway proxy event to the events API.

    Args:
        event: API Gateway proxy event
        api: EventsApi serving the request

    Returns:
        API Gateway proxy response
    """
    logger = logging.getLogger(__name__)
    method = (event.get('httpMethod') or 'GET').upper()
    path = event.get('path') or '/'

    if path.rstrip('/') == EVENTS_PATH:
        if method != 'GET':
            return _response(405, {'error': 'Method not allowed'})

        query = event.get('queryStringParameters') or {}
        try:
            events = api.list_events(
                event_type=query.get('type'),
                force_refresh=query.get('force') == '1'
            )
        except EventsUnavailable as e:
            logger.error(f"Events unavailable: {e}")
            return _response(500, {'error': 'Failed to load events'})

        return _response(200, [e.to_dict() for e in events])

    match = INTEREST_PATH.match(path)
    if match:
        if method != 'POST':
            return _response(405, {'error': 'Method not allowed'})

        action = _parse_body(event).get('action')
        try:
            stats = api.register_interest(match.group('event_id'), action)
        except InvalidAction as e:
            logger.warning(f"Rejected interest request: {e}")
            return _response(400, {'error': 'Invalid action'})

        return _response(200, stats.to_dict())

    return _response(404, {'error': 'Not found'})


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Main Lambda handler function for the events API.

    Args:
        event: API Gateway proxy event
        context: Lambda context object

    Returns:
        API Gateway proxy response
    """
    api = get_api()
    logger = logging.getLogger(__name__)

    start_time = time.time()
    logger.info(
        "Request received",
        extra={'method': event.get('httpMethod'), 'path': event.get('path')}
    )

    try:
        response = handle_request(event, api)
    except Exception as e:
        logger.error(
            f"Request failed: {str(e)}",
            extra={'error_type': type(e).__name__},
            exc_info=True
        )
        response = _response(500, {'error': 'Internal server error'})

    duration = time.time() - start_time
    logger.info(
        "Request completed",
        extra={
            'status_code': response['statusCode'],
            'duration_seconds': round(duration, 3)
        }
    )
    return response
