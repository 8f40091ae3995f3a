"""
Scanning of the local podcast library for already-downloaded episodes.
"""

import logging
import os

from .storage import Storage


class LocalLibraryScanner:
    """Finds which episodes of a podcast are already on disk."""

    def __init__(self, storage: Storage):
        """Initialize with storage instance."""
        self.storage = storage
        self.logger = logging.getLogger(__name__)

    def scan(self, podcast_title: str) -> set[str]:
        """Return downloaded episode names, file extensions stripped.

        A missing podcast directory yields an empty set.
        """
        podcast_dir = self.storage.podcast_dir(podcast_title)
        downloaded = {
            os.path.splitext(filename)[0]
            for filename in self.storage.list_files(podcast_dir)
        }
        self.logger.debug(
            "Found %d downloaded episodes in %s", len(downloaded), podcast_dir
        )
        return downloaded
