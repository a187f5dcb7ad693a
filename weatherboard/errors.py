"""Application exception classes."""

from enum import StrEnum


class RejectReason(StrEnum):
    EMPTY_INPUT = "empty_input"
    DUPLICATE = "duplicate"


class WeatherboardError(Exception):
    """Base class for weatherboard errors."""


class InputRejected(WeatherboardError):
    """Raised when a location name is empty or already tracked."""

    def __init__(self, reason: RejectReason, candidate: str = "") -> None:
        super().__init__(f"Location rejected ({reason.value}): {candidate!r}")
        self.reason = reason
        self.candidate = candidate


class FetchFailed(WeatherboardError):
    """Raised when a provider response cannot be fetched or parsed."""

    def __init__(self, location: str, cause: str) -> None:
        super().__init__(f"Fetch failed for {location}: {cause}")
        self.location = location
        self.cause = cause


class ConfigurationMissing(WeatherboardError):
    """Raised when required configuration, such as the API key, is absent."""


class StorageUnavailable(WeatherboardError):
    """Raised when persisted state cannot be read or written."""
