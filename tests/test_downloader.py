"""
Tests for extension resolution and the single-file transfer.
"""

import os
import shutil
import tempfile
import unittest
from typing import Iterator
from unittest.mock import Mock, patch

import requests

from podcatcher.downloader import (
    download_file_to_path,
    find_extension,
    resolve_extension,
)
from podcatcher.errors import DownloadError

from tests.utils import create_test_episode


class TestResolveExtension(unittest.TestCase):
    """Test file extension resolution."""

    def test_known_mime_types(self) -> None:
        """Test the audio MIME types with fixed extensions."""
        cases = {
            "audio/mpeg": ".mp3",
            "audio/mp4": ".m4a",
            "audio/ogg": ".ogg",
        }
        for mime_type, extension in cases.items():
            episode = create_test_episode(
                enclosure_url="http://test.com/file", mime_type=mime_type
            )
            self.assertEqual(resolve_extension(episode), extension)

    def test_mime_type_wins_over_url(self) -> None:
        """Test that a known MIME type is used even if the URL differs."""
        episode = create_test_episode(
            enclosure_url="http://test.com/file.wav", mime_type="audio/mp4"
        )
        self.assertEqual(resolve_extension(episode), ".m4a")

    def test_mime_type_parameters_ignored(self) -> None:
        """Test MIME types with parameters and mixed case."""
        episode = create_test_episode(
            enclosure_url="http://test.com/file",
            mime_type="Audio/MPEG; charset=binary",
        )
        self.assertEqual(resolve_extension(episode), ".mp3")

    def test_unknown_mime_type_falls_back_to_url(self) -> None:
        """Test sniffing the extension from the URL path."""
        episode = create_test_episode(
            enclosure_url="http://test.com/media/show.xyz",
            mime_type="application/octet-stream",
        )
        self.assertEqual(resolve_extension(episode), ".xyz")

    def test_missing_mime_type_falls_back_to_url(self) -> None:
        """Test an enclosure without a type."""
        episode = create_test_episode(
            enclosure_url="http://test.com/show.opus?token=abc#t=10",
            mime_type=None,
        )
        self.assertEqual(resolve_extension(episode), ".opus")

    def test_no_extension_raises(self) -> None:
        """Test that an undeterminable extension fails the episode."""
        episode = create_test_episode(
            enclosure_url="http://test.com/stream?format=mp3",
            mime_type="video/unknown",
        )
        with self.assertRaises(DownloadError):
            resolve_extension(episode)

    def test_find_extension(self) -> None:
        """Test URL extension sniffing directly."""
        self.assertEqual(find_extension("http://a.com/b/c.mp3"), ".mp3")
        self.assertEqual(find_extension("http://a.com/b.d/c"), None)
        self.assertEqual(find_extension("http://a.com/"), None)
        self.assertEqual(find_extension(""), None)


class TestDownloadFileToPath(unittest.TestCase):
    """Test the blocking file transfer."""

    def setUp(self) -> None:
        """Set up test fixtures."""
        self.download_dir = tempfile.mkdtemp()
        self.output_path = os.path.join(self.download_dir, "test.mp3")

    def tearDown(self) -> None:
        """Clean up test fixtures."""
        if os.path.exists(self.download_dir):
            shutil.rmtree(self.download_dir)

    def mock_response(self) -> Mock:
        """Create a streaming response usable as a context manager."""
        mock_response = Mock()
        mock_response.headers = {"content-length": "12"}
        mock_response.iter_content.return_value = [b"test ", b"", b"content"]
        mock_response.raise_for_status.return_value = None
        mock_response.__enter__ = Mock(return_value=mock_response)
        mock_response.__exit__ = Mock(return_value=None)
        return mock_response

    @patch("requests.get")
    def test_download_success(self, mock_get: Mock) -> None:
        """Test successful file download."""
        mock_get.return_value = self.mock_response()

        file_path = download_file_to_path(
            "http://example.com/test.mp3", self.output_path, False
        )

        self.assertEqual(file_path, self.output_path)
        with open(self.output_path, "rb") as f:
            self.assertEqual(f.read(), b"test content")
        mock_get.assert_called_once_with(
            "http://example.com/test.mp3", stream=True, timeout=30
        )

    @patch("requests.get")
    def test_download_network_error(self, mock_get: Mock) -> None:
        """Test file download with network error."""
        mock_get.side_effect = requests.exceptions.RequestException(
            "Network error"
        )

        with self.assertRaises(DownloadError):
            download_file_to_path(
                "http://example.com/test.mp3", self.output_path, False
            )

        self.assertFalse(os.path.exists(self.output_path))

    @patch("requests.get")
    def test_download_http_error(self, mock_get: Mock) -> None:
        """Test file download with HTTP error status."""
        mock_response = self.mock_response()
        mock_response.raise_for_status.side_effect = (
            requests.exceptions.HTTPError("404")
        )
        mock_get.return_value = mock_response

        with self.assertRaises(DownloadError):
            download_file_to_path(
                "http://example.com/test.mp3", self.output_path, False
            )

        self.assertFalse(os.path.exists(self.output_path))

    @patch("requests.get")
    def test_partial_file_removed(self, mock_get: Mock) -> None:
        """Test that a transfer broken midway leaves no file behind."""

        def broken_stream(chunk_size: int) -> Iterator[bytes]:
            yield b"partial"
            raise requests.exceptions.ConnectionError("connection reset")

        mock_response = self.mock_response()
        mock_response.iter_content.side_effect = broken_stream
        mock_get.return_value = mock_response

        with self.assertRaises(DownloadError):
            download_file_to_path(
                "http://example.com/test.mp3", self.output_path, False
            )

        self.assertFalse(os.path.exists(self.output_path))


if __name__ == "__main__":
    unittest.main()
