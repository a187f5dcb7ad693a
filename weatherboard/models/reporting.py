"""Reporting models for refresh cycles."""

from dataclasses import dataclass, field


@dataclass
class CycleSummary:
    cycle: int
    locations: int = 0
    succeeded: int = 0
    failed: int = 0
    duration_seconds: float = 0.0
    discarded: bool = False
    errors: list[str] = field(default_factory=list)
