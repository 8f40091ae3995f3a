"""
Factory functions for creating PodcastManager instances.

This module provides simple factory functions that wire up dependencies
clearly.
"""

import logging
from typing import Optional

from .config import ConfigStore
from .episode_downloader import DownloadOrchestrator
from .feed import FeedClient, FeedparserClient
from .library import LocalLibraryScanner
from .manager import PodcastManager
from .state import StateStore
from .storage import Storage


def create_manager(
    podcast_root: str,
    feed_client: Optional[FeedClient] = None,
    max_workers: Optional[int] = None,
    show_progress: bool = True,
) -> PodcastManager:
    """Create a PodcastManager for the given podcast root.

    Loads the config and the subscription state; loading the state may run
    a refresh of all subscriptions. ConfigError and StateError propagate.
    """
    logger = logging.getLogger(__name__)
    logger.debug("Using podcast directory: %s", podcast_root)

    storage = Storage(podcast_root)
    config = ConfigStore(storage).load()
    client = feed_client if feed_client is not None else FeedparserClient()
    orchestrator = DownloadOrchestrator(
        storage,
        LocalLibraryScanner(storage),
        max_workers=max_workers,
        show_progress=show_progress,
    )
    state_store = StateStore(storage, client, orchestrator, config)
    state_store.load()

    return PodcastManager(state_store, client, orchestrator)
