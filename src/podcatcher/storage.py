"""
Pure storage layer for file operations under the podcast root.

This module provides low-level file operations without any business logic.
"""

import os
from typing import Optional

# Characters that cannot appear inside a single path component.
_UNSAFE_CHARS = {"/", "\\", "\0"}


def safe_component(name: str) -> str:
    """Make a title usable as a single file or directory name.

    Path separators and NUL become ``_``, and so do leading dots, so that
    ``.`` and ``..`` never address the root or its parent.
    """
    safe = "".join("_" if char in _UNSAFE_CHARS else char for char in name)
    stripped = safe.lstrip(".")
    return "_" * (len(safe) - len(stripped)) + stripped


class Storage:
    """File operations rooted at the podcast directory."""

    def __init__(self, base_dir: str):
        """Initialize with base directory."""
        self.base_dir = base_dir

    def ensure_directory(self, path: str) -> None:
        """Create directory if it doesn't exist."""
        os.makedirs(path, exist_ok=True)

    def join_path(self, *parts: str) -> str:
        """Join path parts."""
        return os.path.join(*parts)

    def root_path(self, filename: str) -> str:
        """Path of a file stored directly in the podcast root."""
        return os.path.join(self.base_dir, filename)

    def podcast_dir(self, podcast_title: str) -> str:
        """Directory holding the episodes of one podcast."""
        return os.path.join(self.base_dir, safe_component(podcast_title))

    def ensure_podcast_dir(self, podcast_title: str) -> str:
        """Ensure podcast directory exists and return its path."""
        path = self.podcast_dir(podcast_title)
        self.ensure_directory(path)
        return path

    def read_text(self, path: str) -> Optional[str]:
        """Read a text file, return None if it doesn't exist.

        Any other I/O error propagates.
        """
        if not os.path.exists(path):
            return None
        with open(path, "r", encoding="utf-8") as f:
            return f.read()

    def write_text(self, path: str, text: str) -> None:
        """Write a text file in place."""
        directory = os.path.dirname(path)
        if directory:
            self.ensure_directory(directory)
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)

    def replace_text(self, path: str, text: str, tmp_path: str) -> None:
        """Write text to tmp_path, then rename it over path.

        Readers of ``path`` see either the old or the new content, never a
        partial write.
        """
        self.write_text(tmp_path, text)
        os.replace(tmp_path, path)

    def list_files(self, path: str) -> list[str]:
        """List regular file names in a directory, [] if it is missing."""
        if not os.path.isdir(path):
            return []
        return [
            item
            for item in os.listdir(path)
            if os.path.isfile(os.path.join(path, item))
        ]
