"""
Link and hashtag extraction from free-text event descriptions.

Grammar:
    URL token     ``http://`` or ``https://`` followed by one or more
                  non-whitespace characters; the token ends at the next
                  whitespace or the end of the text.
    Hashtag token ``#`` followed by one or more word characters
                  (ASCII letters, digits, underscore).

Links keep their order of appearance and are never deduplicated. Hashtags
are uppercased, also kept in order with duplicates, and the markers used
for type classification are left out.
"""
import logging
import re
from typing import List, Optional, Tuple
from urllib.parse import urlsplit

from processor.models import EventLink, ExtractedText

logger = logging.getLogger(__name__)

URL_PATTERN = re.compile(r'https?://\S+')
HASHTAG_PATTERN = re.compile(r'#(\w+)', re.ASCII)

RESERVED_TAGS = frozenset({'IRL', 'VR', 'VIRTUAL', 'RADIO'})

# Hostname fragment -> label, checked in order
PLATFORM_LABELS: List[Tuple[str, str]] = [
    ('youtube.com', 'YouTube'),
    ('youtu.be', 'YouTube'),
    ('twitch.tv', 'Twitch'),
    ('spotify.com', 'Spotify'),
    ('soundcloud.com', 'SoundCloud'),
    ('mixcloud.com', 'Mixcloud'),
    ('bandcamp.com', 'Bandcamp'),
    ('tiktok.com', 'TikTok'),
    ('facebook.com', 'Facebook'),
    ('instagram.com', 'Instagram'),
]

RADIO_DOMAINS = ('hpsbassline.myftp.biz', 'azura.hpsbassline.myftp.biz')
RADIO_LABEL = 'Radio'
FALLBACK_LABEL = 'Link'


def _parse_hostname(url: str) -> Optional[str]:
    """Return the lowercased hostname of ``url`` or None if it does not parse."""
    try:
        parts = urlsplit(url)
        # Raises on a malformed port
        _ = parts.port
    except ValueError:
        return None
    if parts.scheme not in ('http', 'https') or not parts.hostname:
        return None
    return parts.hostname.lower()


def label_for_url(url: str) -> str:
    """
    Derive a human-readable label for a link.

    Args:
        url: Absolute URL

    Returns:
        Platform name, "Radio", the bare hostname, or "Link" when the URL
        cannot be parsed
    """
    host = _parse_hostname(url)
    if host is None:
        logger.debug(f"Could not parse URL for labelling: {url}")
        return FALLBACK_LABEL

    for fragment, label in PLATFORM_LABELS:
        if fragment in host:
            return label

    if 'radio' in host or any(domain in host for domain in RADIO_DOMAINS):
        return RADIO_LABEL

    if host.startswith('www.'):
        return host[len('www.'):]
    return host


def extract_links(text: Optional[str]) -> List[EventLink]:
    """Return every URL token in ``text`` as a labelled link."""
    return [
        EventLink(url=match, label=label_for_url(match))
        for match in URL_PATTERN.findall(text or '')
    ]


def extract_tags(text: Optional[str]) -> List[str]:
    """Return uppercased hashtags in ``text`` without the reserved markers."""
    tags = []
    for token in HASHTAG_PATTERN.findall(text or ''):
        tag = token.upper()
        if tag not in RESERVED_TAGS:
            tags.append(tag)
    return tags


def extract_links_and_tags(text: Optional[str]) -> ExtractedText:
    """
    Scan a description for links and tags.

    Args:
        text: Event description, may be None

    Returns:
        ExtractedText with links and tags in order of appearance
    """
    return ExtractedText(
        links=tuple(extract_links(text)),
        tags=tuple(extract_tags(text))
    )
