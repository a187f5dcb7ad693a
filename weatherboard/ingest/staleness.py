"""Staleness checks for refresh snapshots."""

from datetime import UTC, datetime


def is_snapshot_stale(
    completed_at_iso: str | None, max_age_seconds: float, now: datetime | None = None
) -> bool:
    """Check if a snapshot is stale based on its completion time.

    A snapshot that never completed is stale.
    """
    age = snapshot_age_seconds(completed_at_iso, now)
    return age > max_age_seconds


def snapshot_age_seconds(
    completed_at_iso: str | None, now: datetime | None = None
) -> float:
    """Get the age of a snapshot in seconds."""
    if now is None:
        now = datetime.now(UTC)
    completed = _parse_timestamp(completed_at_iso)
    if completed is None:
        return float("inf")
    return (now - completed).total_seconds()


def _parse_timestamp(iso_str: str | None) -> datetime | None:
    """Parse an ISO timestamp, handling various formats."""
    try:
        dt = datetime.fromisoformat(iso_str)  # type: ignore[arg-type]
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=UTC)
        return dt
    except (ValueError, TypeError):
        return None
