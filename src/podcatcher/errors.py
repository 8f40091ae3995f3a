"""
Exception types raised by the podcatcher package.
"""


class PodcatcherError(Exception):
    """Base class for all podcatcher errors."""


class ConfigError(PodcatcherError):
    """Config file exists but could not be read."""


class StateError(PodcatcherError):
    """Subscription state file could not be read or parsed."""

    def __init__(self, path: str, reason: object):
        self.path = path
        self.reason = reason
        super().__init__(f"Could not parse: {path}\nReason: {reason}")


class FeedError(PodcatcherError):
    """Feed could not be fetched or parsed."""


class DownloadError(PodcatcherError):
    """A single episode could not be downloaded."""


class SubscriptionNotFoundError(PodcatcherError):
    """No subscription with the requested title."""
