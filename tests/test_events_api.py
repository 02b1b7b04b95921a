"""Unit tests for EventsApi."""
from unittest.mock import Mock

import pytest

from api.events_api import EventsApi, EventsUnavailable, filter_events
from processor.models import EnrichedEvent, EventStatus, InterestStats
from source.errors import RateLimitedError, UpstreamUnavailable
from storage.event_cache import EventCache
from storage.interest_store import InterestStore, InvalidAction


def make_event(event_id: str, event_type: str = 'other', status: str = 'upcoming') -> EnrichedEvent:
    return EnrichedEvent(
        id=event_id,
        name=f"Event {event_id}",
        description=None,
        image=None,
        start=None,
        end=None,
        type=event_type,
        location=None,
        link='#',
        links=(),
        tags=(),
        status=EventStatus(code=status, label=status.title()),
        stats=InterestStats()
    )


@pytest.fixture
def events():
    return [
        make_event('1', 'irl', 'upcoming'),
        make_event('2', 'virtual', 'live'),
        make_event('3', 'irl', 'past'),
        make_event('4', 'radio', 'upcoming'),
    ]


@pytest.fixture
def fetcher(events):
    fetcher = Mock()
    fetcher.get_events.return_value = events
    return fetcher


@pytest.fixture
def cache():
    return EventCache()


@pytest.fixture
def api(fetcher, cache):
    return EventsApi(fetcher=fetcher, cache=cache, interest_store=InterestStore())


class TestFilterEvents:
    """Test cases for filter_events."""

    def test_past_events_always_excluded(self, events):
        """Test that past events never appear."""
        assert [e.id for e in filter_events(events)] == ['1', '2', '4']

    def test_type_filter_case_insensitive(self, events):
        """Test filtering by type in any case."""
        assert [e.id for e in filter_events(events, 'IRL')] == ['1']
        assert [e.id for e in filter_events(events, 'Virtual')] == ['2']

    def test_unknown_type_matches_nothing(self, events):
        """Test that an unknown type yields an empty list."""
        assert filter_events(events, 'concert') == []

    def test_empty_type_means_no_filter(self, events):
        """Test that an empty type string does not filter."""
        assert len(filter_events(events, '')) == 3


class TestEventsApi:
    """Test cases for EventsApi class."""

    def test_list_events(self, api, fetcher):
        """Test listing passes the force flag and filters results."""
        result = api.list_events(event_type='irl', force_refresh=True)

        assert [e.id for e in result] == ['1']
        fetcher.get_events.assert_called_once_with(force_refresh=True)

    def test_fallback_to_cache_on_error(self, api, fetcher, cache, events):
        """Test that upstream errors serve the filtered cache."""
        cache.store(events, stored_at=0)
        fetcher.get_events.side_effect = UpstreamUnavailable('boom', status_code=502)

        result = api.list_events(event_type='irl')

        assert [e.id for e in result] == ['1']

    def test_error_without_cache(self, api, fetcher):
        """Test that errors with an empty cache raise EventsUnavailable."""
        fetcher.get_events.side_effect = RateLimitedError('Rate limited')

        with pytest.raises(EventsUnavailable):
            api.list_events()

    def test_unexpected_errors_propagate(self, api, fetcher, cache, events):
        """Test that only upstream errors trigger the fallback."""
        cache.store(events, stored_at=0)
        fetcher.get_events.side_effect = KeyError('bug')

        with pytest.raises(KeyError):
            api.list_events()

    def test_register_interest(self, api):
        """Test interest actions increment the shared counters."""
        api.register_interest('1', 'going')
        stats = api.register_interest('1', 'going')

        assert stats.going == 2
        assert stats.interested == 0

    def test_register_invalid_interest(self, api):
        """Test that invalid actions raise InvalidAction."""
        with pytest.raises(InvalidAction):
            api.register_interest('1', 'maybe')
