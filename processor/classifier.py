"""Event type classification from hashtag markers."""
from typing import Optional

from processor.models import TYPE_IRL, TYPE_OTHER, TYPE_RADIO, TYPE_VIRTUAL

# Checked in order, first match wins
TYPE_MARKERS = [
    (TYPE_IRL, ('#IRL',)),
    (TYPE_VIRTUAL, ('#VR', '#VIRTUAL')),
    (TYPE_RADIO, ('#RADIO',)),
]


def detect_type(name: Optional[str], description: Optional[str]) -> str:
    """
    Classify an event by the markers in its name and description.

    Args:
        name: Event name
        description: Event description, may be None

    Returns:
        One of "irl", "virtual", "radio" or "other"
    """
    text = f"{name or ''}\n{description or ''}".upper()

    for event_type, markers in TYPE_MARKERS:
        if any(marker in text for marker in markers):
            return event_type

    return TYPE_OTHER
