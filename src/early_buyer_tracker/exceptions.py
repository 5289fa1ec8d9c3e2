"""
Error types raised by the early buyer pipeline.
"""

from typing import Optional


class TrackerError(Exception):
    """Base class for all tracker errors."""


class ConfigError(TrackerError, ValueError):
    """Required configuration (e.g. the provider API key) is missing or invalid."""


class ValidationError(TrackerError, ValueError):
    """User input was rejected before any network call was made."""


class ProviderError(TrackerError):
    """The data provider returned a non-success status or an error payload."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status
