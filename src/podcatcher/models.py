"""
Data models for configuration, subscriptions, podcasts and episodes.
"""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

# Fractional seconds beyond microseconds (e.g. nanosecond timestamps).
_LONG_FRACTION = re.compile(r"(\.\d{6})\d+")


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """Format a datetime as an ISO-8601 string in UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp into an aware UTC datetime.

    Accepts a trailing ``Z``, more than six fractional digits, and naive
    timestamps (which are taken to be UTC).
    """
    if not isinstance(value, str):
        raise ValueError(f"timestamp must be a string, got {value!r}")
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    text = _LONG_FRACTION.sub(r"\1", text)
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


@dataclass(frozen=True)
class Config:
    """User limits read from the config file."""

    auto_download_limit: int = 1
    auto_delete_limit: int = 0


@dataclass
class Subscription:
    """A subscribed feed, keyed by its title."""

    title: str
    url: str
    num_episodes: int

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Subscription":
        """Create Subscription from dictionary."""
        title = data["title"]
        url = data["url"]
        num_episodes = data["num_episodes"]
        if not isinstance(title, str) or not isinstance(url, str):
            raise TypeError("subscription title and url must be strings")
        if isinstance(num_episodes, bool) or not isinstance(num_episodes, int):
            raise TypeError("subscription num_episodes must be an integer")
        return cls(title=title, url=url, num_episodes=num_episodes)

    def to_json(self) -> dict[str, Any]:
        """Convert subscription to JSON-serializable dictionary."""
        return asdict(self)


@dataclass
class State:
    """Persisted subscription list and time of the last successful load."""

    last_run_time: datetime = field(default_factory=utc_now)
    subs: list[Subscription] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "State":
        """Create State from dictionary."""
        if not isinstance(data, dict):
            raise TypeError("state must be a JSON object")
        subs_data = data["subs"]
        if not isinstance(subs_data, list):
            raise TypeError("subs must be a list")
        return cls(
            last_run_time=parse_timestamp(data["last_run_time"]),
            subs=[Subscription.from_dict(sub) for sub in subs_data],
        )

    def to_json(self) -> dict[str, Any]:
        """Convert state to JSON-serializable dictionary."""
        return {
            "last_run_time": format_timestamp(self.last_run_time),
            "subs": [sub.to_json() for sub in self.subs],
        }

    def titles(self) -> set[str]:
        """Titles of all subscriptions."""
        return {sub.title for sub in self.subs}


@dataclass
class Episode:
    """A single feed item. Every field may be missing from the feed."""

    title: Optional[str] = None
    enclosure_url: Optional[str] = None
    mime_type: Optional[str] = None


@dataclass
class Podcast:
    """A fetched feed: its title and items, newest first.

    Never persisted; rebuilt from the feed whenever it is needed.
    """

    title: str
    episodes: list[Episode] = field(default_factory=list)
