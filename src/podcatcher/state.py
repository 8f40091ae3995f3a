"""
Durable subscription state stored in ``<root>/.subscriptions``.
"""

import json
import logging
from datetime import datetime, timedelta
from typing import Callable

from .episode_downloader import DownloadOrchestrator
from .errors import FeedError, StateError
from .feed import FeedClient
from .models import Config, Podcast, State, Subscription, utc_now
from .storage import Storage

STATE_FILE = ".subscriptions"
STATE_TMP_FILE = ".subscriptions.tmp"
REFRESH_INTERVAL = timedelta(seconds=86400)


class StateStore:
    """Owns the subscription list and persists it atomically."""

    def __init__(
        self,
        storage: Storage,
        feed_client: FeedClient,
        orchestrator: DownloadOrchestrator,
        config: Config,
        clock: Callable[[], datetime] = utc_now,
    ):
        """Initialize with dependencies. Call load() before use."""
        self.storage = storage
        self.feed_client = feed_client
        self.orchestrator = orchestrator
        self.config = config
        self.clock = clock
        self.state = State(last_run_time=clock())
        self.logger = logging.getLogger(__name__)

    @property
    def path(self) -> str:
        """Location of the state file."""
        return self.storage.root_path(STATE_FILE)

    @property
    def tmp_path(self) -> str:
        """Location the state is written to before being renamed."""
        return self.storage.root_path(STATE_TMP_FILE)

    def load(self) -> State:
        """Load persisted state, refreshing feeds if it is over a day old.

        Raises StateError if the state file exists but cannot be read or
        parsed. last_run_time is set to now on every successful load.
        """
        path = self.path
        try:
            text = self.storage.read_text(path)
        except (OSError, UnicodeDecodeError) as e:
            raise StateError(path, e) from e

        if text is None:
            self.logger.debug("No state file at %s, starting empty", path)
            self.state = State(last_run_time=self.clock())
            return self.state

        try:
            self.state = State.from_dict(json.loads(text))
        except (ValueError, KeyError, TypeError) as e:
            raise StateError(path, e) from e

        if self.clock() - self.state.last_run_time > REFRESH_INTERVAL:
            self.refresh()

        self.state.last_run_time = self.clock()
        return self.state

    def save(self) -> None:
        """Write state to the temp file, then rename it into place."""
        serialized = json.dumps(self.state.to_json())
        self.storage.replace_text(self.path, serialized, self.tmp_path)
        self.logger.debug("Saved %d subscriptions", len(self.state.subs))

    def subscriptions(self) -> list[Subscription]:
        """Subscriptions in the order they were added."""
        return list(self.state.subs)

    def subscribe(self, url: str) -> Podcast:
        """Subscribe to the feed at url and download its newest episodes.

        Raises FeedError if the feed cannot be fetched. A feed whose title
        is already subscribed leaves the state unchanged.
        """
        podcast = self.feed_client.fetch(url)

        if podcast.title not in self.state.titles():
            self.state.subs.append(
                Subscription(
                    title=podcast.title,
                    url=url,
                    num_episodes=len(podcast.episodes),
                )
            )
            self.logger.info("Subscribed to '%s'", podcast.title)
        else:
            self.logger.info("Already subscribed to '%s'", podcast.title)

        try:
            self.save()
        except (OSError, TypeError) as e:
            self.logger.error("Could not save %s: %s", self.path, e)

        self.auto_download(podcast)
        return podcast

    def refresh(self) -> None:
        """Re-fetch every subscription and download its newest episodes."""
        self.logger.info("Checking for new episodes...")
        for sub in self.subscriptions():
            try:
                podcast = self.feed_client.fetch(sub.url)
            except FeedError as e:
                self.logger.error("Could not refresh '%s': %s", sub.title, e)
                continue
            self.auto_download(podcast)

    def auto_download(self, podcast: Podcast) -> None:
        """Download the newest episodes allowed by the config limit."""
        limit = self.config.auto_download_limit
        if limit <= 0:
            return
        self.orchestrator.download_recent(podcast, limit)
