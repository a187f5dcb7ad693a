"""Common types and helpers shared across models."""

from datetime import UTC, datetime
from enum import StrEnum
from typing import TypeAlias

LocationId: TypeAlias = str
TrackedLocations: TypeAlias = tuple[LocationId, ...]


class UnitPreference(StrEnum):
    CELSIUS = "C"
    FAHRENHEIT = "F"

    def toggled(self) -> "UnitPreference":
        if self is UnitPreference.CELSIUS:
            return UnitPreference.FAHRENHEIT
        return UnitPreference.CELSIUS


def normalize_location(raw: str) -> LocationId:
    return raw.strip().lower()


def utc_now() -> datetime:
    return datetime.now(UTC)


def utc_now_iso() -> str:
    return utc_now().isoformat()
