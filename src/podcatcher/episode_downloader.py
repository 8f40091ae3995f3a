"""
Download service for podcast episodes.

Each episode is an independent unit of work run on a thread pool. Units
share only the read-only set of already-downloaded titles and write to
distinct files, so no locking is needed.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, TypeVar

from tqdm import tqdm

from . import downloader
from .errors import DownloadError
from .library import LocalLibraryScanner
from .models import Episode, Podcast
from .storage import Storage, safe_component

T = TypeVar("T")


def unique_by_title(episodes: list[Episode]) -> list[Episode]:
    """Drop episodes whose file name repeats an earlier episode's.

    Untitled episodes are kept; they are skipped at download time.
    """
    seen: set[str] = set()
    unique: list[Episode] = []
    for episode in episodes:
        if episode.title:
            stem = safe_component(episode.title)
            if stem in seen:
                continue
            seen.add(stem)
        unique.append(episode)
    return unique


@dataclass
class DownloadResult:
    """Result of a download operation."""

    title: Optional[str]
    success: bool
    file_path: Optional[str] = None
    error: Optional[str] = None
    was_cached: bool = False


@dataclass
class DownloadSummary:
    """Summary of multiple download operations."""

    successful: int
    skipped: int
    failed: int
    results: list[DownloadResult]

    @classmethod
    def from_results(cls, results: list[DownloadResult]) -> "DownloadSummary":
        """Create summary from list of results."""
        successful = sum(1 for r in results if r.success and not r.was_cached)
        skipped = sum(1 for r in results if r.was_cached)
        failed = sum(1 for r in results if not r.success)

        return cls(
            successful=successful,
            skipped=skipped,
            failed=failed,
            results=results,
        )


class DownloadOrchestrator:
    """Downloads the missing episodes of a podcast in parallel."""

    def __init__(
        self,
        storage: Storage,
        scanner: LocalLibraryScanner,
        max_workers: Optional[int] = None,
        show_progress: bool = True,
    ):
        """Initialize with storage and scanner.

        max_workers=None uses the ThreadPoolExecutor default.
        """
        self.storage = storage
        self.scanner = scanner
        self.max_workers = max_workers
        self.show_progress = show_progress
        self.logger = logging.getLogger(__name__)

    def download_all(self, podcast: Podcast) -> DownloadSummary:
        """Download every episode not already on disk."""
        downloaded = self.scanner.scan(podcast.title)
        return self._fan_out(
            podcast,
            unique_by_title(podcast.episodes),
            lambda episode: self.download_episode(
                podcast.title, episode, downloaded
            ),
        )

    def download_recent(self, podcast: Podcast, limit: int) -> DownloadSummary:
        """Download the newest `limit` episodes not already on disk."""
        downloaded = self.scanner.scan(podcast.title)
        return self._fan_out(
            podcast,
            unique_by_title(podcast.episodes[: max(limit, 0)]),
            lambda episode: self.download_episode(
                podcast.title, episode, downloaded
            ),
        )

    def download_selected(
        self, podcast: Podcast, episode_numbers: Iterable[int]
    ) -> DownloadSummary:
        """Download episodes by number, where 1 is the last feed item.

        Feeds list the newest item first, so number n addresses
        ``episodes[len(episodes) - n]``.
        """
        downloaded = self.scanner.scan(podcast.title)
        episodes = podcast.episodes

        def download_number(number: int) -> Optional[DownloadResult]:
            if not 1 <= number <= len(episodes):
                raise DownloadError(
                    f"No episode {number} in '{podcast.title}' "
                    f"({len(episodes)} episodes)"
                )
            return self.download_episode(
                podcast.title, episodes[len(episodes) - number], downloaded
            )

        # One unit per target file: repeated numbers, and numbers whose
        # episodes share a title, collapse to the first occurrence.
        claimed: set[str] = set()
        numbers: list[int] = []
        for number in dict.fromkeys(episode_numbers):
            if 1 <= number <= len(episodes):
                title = episodes[len(episodes) - number].title
                if title:
                    stem = safe_component(title)
                    if stem in claimed:
                        continue
                    claimed.add(stem)
            numbers.append(number)

        return self._fan_out(podcast, numbers, download_number)

    def download_episode(
        self, podcast_title: str, episode: Episode, downloaded: set[str]
    ) -> Optional[DownloadResult]:
        """Download single episode unless it is already on disk.

        Returns None for episodes without a title or enclosure URL.
        """
        if not episode.title:
            return None

        stem = safe_component(episode.title)
        if stem in downloaded:
            self.logger.debug("Episode already exists: %s", episode.title)
            return DownloadResult(
                title=episode.title, success=True, was_cached=True
            )

        if not episode.enclosure_url:
            return None

        try:
            extension = downloader.resolve_extension(episode)
            podcast_dir = self.storage.ensure_podcast_dir(podcast_title)
            target_path = self.storage.join_path(podcast_dir, stem + extension)
            file_path = downloader.download_file_to_path(
                episode.enclosure_url, target_path, self.show_progress
            )
            return DownloadResult(
                title=episode.title, success=True, file_path=file_path
            )
        except (DownloadError, OSError) as e:
            return DownloadResult(
                title=episode.title, success=False, error=str(e)
            )
        except Exception as e:  # pylint: disable=broad-except
            self.logger.exception(
                "Unexpected error downloading %s", episode.title
            )
            return DownloadResult(
                title=episode.title, success=False, error=str(e)
            )

    def _fan_out(
        self,
        podcast: Podcast,
        items: list[T],
        work: Callable[[T], Optional[DownloadResult]],
    ) -> DownloadSummary:
        """Run work(item) for every item on the pool, log each outcome."""
        results: list[DownloadResult] = []
        if not items:
            return DownloadSummary.from_results(results)

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures: dict[Future[Optional[DownloadResult]], T] = {
                executor.submit(work, item): item for item in items
            }
            with tqdm(
                total=len(futures),
                unit="episode",
                desc=podcast.title,
                disable=not self.show_progress,
            ) as progress_bar:
                for future in as_completed(futures):
                    progress_bar.update(1)
                    try:
                        result = future.result()
                    except DownloadError as e:
                        self.logger.error("%s", e)
                        results.append(
                            DownloadResult(
                                title=None, success=False, error=str(e)
                            )
                        )
                        continue

                    if result is None:
                        continue
                    results.append(result)
                    if result.success and not result.was_cached:
                        self.logger.info("Downloaded: %s", result.title)
                    elif not result.success:
                        self.logger.error(
                            "Failed: %s - %s", result.title, result.error
                        )

        summary = DownloadSummary.from_results(results)
        self.logger.debug(
            "Download results for '%s': %d successful, %d skipped, %d failed",
            podcast.title,
            summary.successful,
            summary.skipped,
            summary.failed,
        )
        return summary
