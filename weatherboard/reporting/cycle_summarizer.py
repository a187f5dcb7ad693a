"""Cycle summarizer: aggregates fetch results into a CycleSummary."""

from weatherboard.models.reporting import CycleSummary
from weatherboard.models.snapshot import FetchFailure, FetchResult


class CycleSummarizer:
    def __init__(self, cycle: int):
        self.summary = CycleSummary(cycle=cycle)

    def record_results(self, results: dict[str, FetchResult]) -> None:
        self.summary.locations = len(results)
        for result in results.values():
            if isinstance(result, FetchFailure):
                self.summary.failed += 1
                self.summary.errors.append(
                    f"{result.location}: {result.cause or result.reason}"
                )
            else:
                self.summary.succeeded += 1

    def mark_discarded(self) -> None:
        self.summary.discarded = True

    def finalize(self, duration_seconds: float) -> CycleSummary:
        self.summary.duration_seconds = round(duration_seconds, 3)
        return self.summary
