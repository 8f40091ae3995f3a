"""
Podcatcher package - Tracks podcast subscriptions, re-polls their feeds,
and downloads new episodes that are not already on disk.

The subscription state is persisted atomically, and episodes are
downloaded in parallel with de-duplication by title.
"""

from .config import ConfigStore
from .episode_downloader import DownloadOrchestrator, DownloadSummary
from .errors import (
    ConfigError,
    DownloadError,
    FeedError,
    PodcatcherError,
    StateError,
    SubscriptionNotFoundError,
)
from .factory import create_manager
from .feed import FeedClient, FeedparserClient
from .library import LocalLibraryScanner
from .manager import PodcastManager
from .models import Config, Episode, Podcast, State, Subscription
from .state import StateStore

__all__ = [
    "Config",
    "ConfigError",
    "ConfigStore",
    "DownloadError",
    "DownloadOrchestrator",
    "DownloadSummary",
    "Episode",
    "FeedClient",
    "FeedError",
    "FeedparserClient",
    "LocalLibraryScanner",
    "Podcast",
    "PodcastManager",
    "PodcatcherError",
    "State",
    "StateError",
    "StateStore",
    "Subscription",
    "SubscriptionNotFoundError",
    "create_manager",
]
