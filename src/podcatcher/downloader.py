"""
Episode file transfer and file extension resolution.
"""

import logging
import os
import posixpath
from typing import Optional
from urllib.parse import urlparse

import requests
from tqdm import tqdm

from .errors import DownloadError
from .models import Episode

MIME_EXTENSIONS = {
    "audio/mpeg": ".mp3",
    "audio/mp4": ".m4a",
    "audio/ogg": ".ogg",
}


def find_extension(url: str) -> Optional[str]:
    """Extension of the last segment of the URL path, e.g. ``.mp3``."""
    path = urlparse(url).path
    extension = posixpath.splitext(posixpath.basename(path))[1]
    if extension in ("", "."):
        return None
    return extension


def resolve_extension(episode: Episode) -> str:
    """Pick the file extension for an episode.

    Known audio MIME types win; otherwise the extension is taken from the
    enclosure URL. Raises DownloadError if neither gives one.
    """
    if episode.mime_type:
        mime_type = episode.mime_type.split(";")[0].strip().lower()
        if mime_type in MIME_EXTENSIONS:
            return MIME_EXTENSIONS[mime_type]

    extension = find_extension(episode.enclosure_url or "")
    if extension is None:
        raise DownloadError(
            f"Could not determine file extension for '{episode.title}' "
            f"(type={episode.mime_type!r}, url={episode.enclosure_url!r})"
        )
    return extension


def download_file_to_path(
    file_url: str, output_path: str, show_progress: bool = True
) -> str:
    """Download file from URL to a specific path.

    The whole body is fetched in one request; on failure any partial file
    is removed and DownloadError is raised.
    """
    logger = logging.getLogger(__name__)

    output_filename = os.path.basename(output_path)
    logger.info("Downloading: %s", output_path)
    try:
        with requests.get(file_url, stream=True, timeout=30) as response:
            response.raise_for_status()

            # Get file size for progress bar
            content_length = int(response.headers.get("content-length", 0))
            logger.debug("Content length: %d bytes", content_length)

            with open(output_path, "wb") as output_file:
                with tqdm(
                    total=content_length,
                    unit="B",
                    unit_scale=True,
                    desc=output_filename,
                    leave=False,
                    disable=not show_progress,
                ) as progress_bar:
                    for chunk in response.iter_content(chunk_size=8192):
                        if chunk:  # Filter out keep-alive chunks
                            output_file.write(chunk)
                            progress_bar.update(len(chunk))

        logger.info("Download complete: %s", output_filename)
        return output_path
    except (requests.exceptions.RequestException, OSError) as e:
        if os.path.exists(output_path):
            os.remove(output_path)  # Clean up partial file
            logger.debug("Cleaned up partial file: %s", output_path)
        raise DownloadError(
            f"Download failed for {output_filename}: {e}"
        ) from e
