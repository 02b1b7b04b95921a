"""Data models for event processing."""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


TYPE_IRL = 'irl'
TYPE_VIRTUAL = 'virtual'
TYPE_RADIO = 'radio'
TYPE_OTHER = 'other'
EVENT_TYPES = (TYPE_IRL, TYPE_VIRTUAL, TYPE_RADIO, TYPE_OTHER)

STATUS_UPCOMING = 'upcoming'
STATUS_LIVE = 'live'
STATUS_PAST = 'past'


@dataclass
class RawEvent:
    """Scheduled event as returned by the upstream guild events API."""
    id: str
    name: str
    description: Optional[str]
    scheduled_start_time: Optional[str]
    scheduled_end_time: Optional[str]
    location: Optional[str]
    image: Optional[str]

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> 'RawEvent':
        """
        Build a RawEvent from an upstream JSON object.

        Args:
            payload: Decoded scheduled event object

        Returns:
            RawEvent with missing optional fields set to None
        """
        metadata = payload.get('entity_metadata') or {}
        return cls(
            id=str(payload.get('id', '')),
            name=payload.get('name') or '',
            description=payload.get('description'),
            scheduled_start_time=payload.get('scheduled_start_time'),
            scheduled_end_time=payload.get('scheduled_end_time'),
            location=metadata.get('location') or None,
            image=payload.get('image') or None
        )


@dataclass(frozen=True)
class EventLink:
    """Link found in an event description."""
    url: str
    label: str


@dataclass(frozen=True)
class EventStatus:
    """Temporal status of an event."""
    code: str
    label: str


@dataclass
class InterestStats:
    """Mutable interest counters shared by every record of one event."""
    going: int = 0
    interested: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {'going': self.going, 'interested': self.interested}


@dataclass(frozen=True)
class ExtractedText:
    """Links and freeform tags extracted from a description."""
    links: Tuple[EventLink, ...] = ()
    tags: Tuple[str, ...] = ()


@dataclass(frozen=True)
class EnrichedEvent:
    """Normalized event with derived type, status, links, tags and stats."""
    id: str
    name: str
    description: Optional[str]
    image: Optional[str]
    start: Optional[str]
    end: Optional[str]
    type: str
    location: Optional[str]
    link: str
    links: Tuple[EventLink, ...]
    tags: Tuple[str, ...]
    status: EventStatus
    stats: InterestStats = field(compare=False)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the JSON shape served to clients."""
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'image': self.image,
            'start': self.start,
            'end': self.end,
            'type': self.type,
            'location': self.location,
            'link': self.link,
            'links': [{'url': l.url, 'label': l.label} for l in self.links],
            'tags': list(self.tags),
            'status': {'code': self.status.code, 'label': self.status.label},
            'stats': self.stats.to_dict()
        }


@dataclass(frozen=True)
class CacheEntry:
    """Last successful fetch result and when it was computed."""
    events: List[EnrichedEvent]
    stored_at: float
