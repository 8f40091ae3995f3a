"""
Shared test helpers.
"""

from typing import Dict, List, Optional

from podcatcher.errors import FeedError
from podcatcher.models import Episode, Podcast


def create_test_episode(
    title: Optional[str] = "Test Episode",
    enclosure_url: Optional[str] = "http://test.com/episode.mp3",
    mime_type: Optional[str] = "audio/mpeg",
) -> Episode:
    """Create an Episode with sensible defaults."""
    return Episode(
        title=title, enclosure_url=enclosure_url, mime_type=mime_type
    )


def create_test_podcast(
    title: str = "Test Podcast", count: int = 3
) -> Podcast:
    """Create a podcast whose episodes are listed newest first.

    Episode N is the Nth oldest, so the list reads N, N-1, ..., 1.
    """
    episodes = [
        create_test_episode(
            title=f"Episode {number}",
            enclosure_url=f"http://test.com/ep{number}.mp3",
        )
        for number in range(count, 0, -1)
    ]
    return Podcast(title=title, episodes=episodes)


def fake_download(url: str, path: str, show_progress: bool = True) -> str:
    """Stand-in for download_file_to_path that writes a small file."""
    with open(path, "wb") as f:
        f.write(url.encode("utf-8"))
    return path


def create_mock_rss_content(
    title: Optional[str], items: List[Dict[str, str]]
) -> bytes:
    """Build RSS XML with the given channel title and items."""
    parts = ['<?xml version="1.0" encoding="UTF-8"?>', '<rss version="2.0">']
    parts.append("<channel>")
    if title is not None:
        parts.append(f"<title>{title}</title>")
    for item in items:
        parts.append("<item>")
        if "title" in item:
            parts.append(f"<title>{item['title']}</title>")
        if "url" in item:
            parts.append(
                f'<enclosure url="{item["url"]}" '
                f'type="{item.get("type", "audio/mpeg")}" length="1000"/>'
            )
        parts.append("</item>")
    parts.append("</channel></rss>")
    return "\n".join(parts).encode("utf-8")


class FakeFeedClient:
    """FeedClient serving podcasts from a dictionary of fixtures."""

    def __init__(self, feeds: Optional[Dict[str, Podcast]] = None):
        self.feeds: Dict[str, Podcast] = dict(feeds or {})
        self.fetched: List[str] = []

    def fetch(self, url: str) -> Podcast:
        """Return the fixture for url or raise FeedError."""
        self.fetched.append(url)
        if url not in self.feeds:
            raise FeedError(f"Could not download {url}: not found")
        return self.feeds[url]
