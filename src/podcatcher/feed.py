"""
Feed retrieval: turns a feed URL into a Podcast.

The rest of the package only depends on the FeedClient protocol, so the
network-backed client can be swapped for a fixture-backed one.
"""

import logging
from typing import Any, Optional, Protocol

import feedparser
import requests

from .errors import FeedError
from .models import Episode, Podcast


class FeedClient(Protocol):
    """Anything that can fetch a feed URL and return its Podcast."""

    def fetch(self, url: str) -> Podcast:
        """Fetch and parse the feed, raising FeedError on failure."""
        ...  # pylint: disable=unnecessary-ellipsis


def download_feed(url: str, timeout: int = 30) -> bytes:
    """Download raw feed content from URL."""
    logger = logging.getLogger(__name__)
    logger.info("Downloading RSS from %s", url)
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.exceptions.RequestException as e:
        raise FeedError(f"Could not download {url}: {e}") from e

    if not response.content:
        raise FeedError(f"Empty response from {url}")

    logger.debug(
        "Downloaded RSS content (%d bytes)", len(response.content)
    )
    return response.content


def _enclosure(entry: Any) -> tuple[Optional[str], Optional[str]]:
    """Return (url, mime type) of the first enclosure of an entry."""
    for enclosure in entry.get("enclosures") or []:
        url = enclosure.get("href") or enclosure.get("url")
        if url:
            return url, enclosure.get("type") or None
    return None, None


def parse_feed(url: str, content: bytes) -> Podcast:
    """Parse feed content into a Podcast."""
    parsed = feedparser.parse(content)
    title = parsed.feed.get("title")

    if not title:
        reason = parsed.get("bozo_exception") or "feed has no title"
        raise FeedError(f"Could not parse feed {url}: {reason}")

    episodes = []
    for entry in parsed.entries:
        enclosure_url, mime_type = _enclosure(entry)
        episodes.append(
            Episode(
                title=entry.get("title") or None,
                enclosure_url=enclosure_url,
                mime_type=mime_type,
            )
        )

    return Podcast(title=title, episodes=episodes)


class FeedparserClient:
    """FeedClient backed by requests and feedparser."""

    def __init__(self, timeout: int = 30):
        """Initialize with HTTP timeout in seconds."""
        self.timeout = timeout
        self.logger = logging.getLogger(__name__)

    def fetch(self, url: str) -> Podcast:
        """Download and parse the feed at url."""
        podcast = parse_feed(url, download_feed(url, self.timeout))
        self.logger.info(
            "Fetched '%s' with %d episodes",
            podcast.title,
            len(podcast.episodes),
        )
        return podcast
