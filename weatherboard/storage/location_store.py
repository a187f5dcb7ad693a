"""Persisted, ordered set of tracked location identifiers."""

import json
import logging
from dataclasses import dataclass

from weatherboard.config.defaults import DEFAULT_STORAGE_KEY
from weatherboard.errors import RejectReason, StorageUnavailable
from weatherboard.models.common import TrackedLocations, normalize_location
from weatherboard.storage.kv_store import KeyValueStore, MemoryKeyValueStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Rejected:
    reason: RejectReason
    candidate: str


class LocationStore:
    """Reads and writes the tracked location list as a JSON blob.

    When the backing store fails, the location store switches to an
    in-memory store for the rest of the session instead of raising.
    """

    def __init__(self, store: KeyValueStore, key: str = DEFAULT_STORAGE_KEY):
        self.store = store
        self.key = key
        self.degraded = False

    def load(self) -> TrackedLocations:
        """Return the persisted locations, or an empty tuple if absent or malformed."""
        try:
            blob = self.store.get(self.key)
        except StorageUnavailable:
            logger.warning("Location storage unreadable, continuing in memory", exc_info=True)
            self._degrade()
            return ()

        if blob is None:
            return ()
        try:
            data = json.loads(blob)
        except json.JSONDecodeError:
            logger.warning("Ignoring malformed location blob under %r", self.key)
            return ()
        if not isinstance(data, list):
            logger.warning("Ignoring non-list location blob under %r", self.key)
            return ()

        # Re-apply normalization and uniqueness to whatever was on disk
        locations: list[str] = []
        for item in data:
            if not isinstance(item, str):
                continue
            loc = normalize_location(item)
            if loc and loc not in locations:
                locations.append(loc)
        return tuple(locations)

    def save(self, locations: TrackedLocations) -> None:
        blob = json.dumps(list(locations))
        try:
            self.store.set(self.key, blob)
        except StorageUnavailable:
            logger.warning("Location storage unwritable, continuing in memory", exc_info=True)
            self._degrade()
            self.store.set(self.key, blob)

    def add(
        self, current: TrackedLocations, candidate: str
    ) -> TrackedLocations | Rejected:
        return add_location(current, candidate)

    def remove(self, current: TrackedLocations, target: str) -> TrackedLocations:
        return remove_location(current, target)

    def _degrade(self) -> None:
        if not self.degraded:
            self.degraded = True
            self.store = MemoryKeyValueStore()


def add_location(
    current: TrackedLocations, candidate: str
) -> TrackedLocations | Rejected:
    """Append a normalized candidate, or reject it as empty or duplicate."""
    loc = normalize_location(candidate)
    if not loc:
        return Rejected(RejectReason.EMPTY_INPUT, candidate)
    if loc in current:
        return Rejected(RejectReason.DUPLICATE, candidate)
    return (*current, loc)


def remove_location(current: TrackedLocations, target: str) -> TrackedLocations:
    """Drop every entry equal to target. Removing an absent entry is a no-op."""
    target = normalize_location(target)
    return tuple(loc for loc in current if loc != target)
