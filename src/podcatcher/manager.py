"""
Main orchestration class for subscription and download operations.
"""

import logging
from typing import Iterable

from .episode_downloader import DownloadOrchestrator, DownloadSummary
from .errors import SubscriptionNotFoundError
from .feed import FeedClient
from .models import Podcast, Subscription
from .state import StateStore


class PodcastManager:
    """
    Entry point for callers: subscribing, listing subscriptions and
    downloading episodes, using dependency injection.
    """

    def __init__(
        self,
        state_store: StateStore,
        feed_client: FeedClient,
        orchestrator: DownloadOrchestrator,
    ):
        """Initialize with dependencies."""
        self.logger = logging.getLogger(__name__)
        self.state_store = state_store
        self.feed_client = feed_client
        self.orchestrator = orchestrator

    def subscribe(self, url: str) -> Podcast:
        """Subscribe to a feed and run its auto-download pass."""
        return self.state_store.subscribe(url)

    def list_subscriptions(self) -> list[Subscription]:
        """Get subscriptions in subscription order."""
        return self.state_store.subscriptions()

    def get_subscription(self, podcast_title: str) -> Subscription:
        """Look up a subscription by podcast title."""
        for sub in self.state_store.subscriptions():
            if sub.title == podcast_title:
                return sub
        raise SubscriptionNotFoundError(
            f"Not subscribed to '{podcast_title}'"
        )

    def fetch_podcast(self, podcast_title: str) -> Podcast:
        """Fetch the current feed of a subscribed podcast."""
        sub = self.get_subscription(podcast_title)
        return self.feed_client.fetch(sub.url)

    def list_episodes(self, podcast_title: str) -> list[tuple[int, str]]:
        """Episode numbers and titles, numbered as download_selected expects.

        Number 1 is the last item in the feed.
        """
        episodes = self.fetch_podcast(podcast_title).episodes
        return [
            (len(episodes) - index, episode.title or "")
            for index, episode in enumerate(episodes)
        ]

    def download_all(self, podcast_title: str) -> DownloadSummary:
        """Download every missing episode of a subscribed podcast."""
        return self.orchestrator.download_all(
            self.fetch_podcast(podcast_title)
        )

    def download_selected(
        self, podcast_title: str, episode_numbers: Iterable[int]
    ) -> DownloadSummary:
        """Download specific episodes of a subscribed podcast."""
        return self.orchestrator.download_selected(
            self.fetch_podcast(podcast_title), episode_numbers
        )

    def download_url(self, url: str) -> DownloadSummary:
        """Download every missing episode of any feed, without subscribing."""
        return self.orchestrator.download_all(self.feed_client.fetch(url))

    def refresh(self) -> None:
        """Check all subscriptions for new episodes now."""
        self.state_store.refresh()
