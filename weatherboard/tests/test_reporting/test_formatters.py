"""Tests for dashboard and cycle summary formatters."""

import json

from weatherboard.models.common import UnitPreference
from weatherboard.models.dashboard import DashboardState
from weatherboard.models.forecast import ForecastBundle
from weatherboard.models.reporting import CycleSummary
from weatherboard.models.snapshot import FetchFailure, FetchSuccess, RefreshSnapshot
from weatherboard.reporting.cycle_summarizer import CycleSummarizer
from weatherboard.reporting.formatters import (
    format_cycle_json,
    format_cycle_text,
    format_dashboard_json,
    format_dashboard_text,
)
from weatherboard.view.projector import project_location


def _state(snapshot: RefreshSnapshot, locations: tuple[str, ...], unit=UnitPreference.CELSIUS, **kw):
    cards = tuple(project_location(loc, snapshot, unit) for loc in locations)
    return DashboardState(locations=locations, snapshot=snapshot, unit=unit, cards=cards, **kw)


def _mixed_snapshot(bundle: ForecastBundle) -> RefreshSnapshot:
    return RefreshSnapshot(
        results={
            "london": FetchSuccess("london", bundle),
            "atlantis": FetchFailure.for_location("atlantis", "http_status:404"),
        },
        cycle=3,
        completed_at="2026-01-01T00:00:00+00:00",
    )


class TestDashboardText:
    def test_empty(self):
        text = format_dashboard_text(_state(RefreshSnapshot(), ()))
        assert "No cities added yet" in text

    def test_cards(self, london_bundle: ForecastBundle):
        state = _state(_mixed_snapshot(london_bundle), ("london", "atlantis", "oslo"))
        text = format_dashboard_text(state)

        assert "[london]" in text
        assert "Temperature: 15.0°C" in text
        assert "Humidity: 60%" in text
        assert "Wind Speed: 3.2 m/s" in text
        assert "Failed to load weather data for atlantis" in text
        assert "No data available" in text

    def test_fahrenheit(self, london_bundle: ForecastBundle):
        state = _state(_mixed_snapshot(london_bundle), ("london",), UnitPreference.FAHRENHEIT)
        assert "Temperature: 59.0°F" in format_dashboard_text(state)

    def test_loading(self, london_bundle: ForecastBundle):
        snap = RefreshSnapshot(results={"london": FetchSuccess("london", london_bundle)}, loading=True)
        assert "Loading weather data..." in format_dashboard_text(_state(snap, ("london",)))

    def test_notice_and_flags(self):
        state = _state(
            RefreshSnapshot(), ("london",), notice="City already added.", stale=True, persisted=False
        )
        text = format_dashboard_text(state)
        assert "! City already added." in text
        assert "out of date" in text
        assert "not being saved" in text


class TestDashboardJson:
    def test_structure(self, london_bundle: ForecastBundle):
        state = _state(_mixed_snapshot(london_bundle), ("london", "atlantis"))
        data = json.loads(format_dashboard_json(state))

        assert data["locations"] == ["london", "atlantis"]
        assert data["cycle"] == 3
        london, atlantis = data["cards"]
        assert london["state"] == "ready"
        assert london["current"]["icon"] == "clear"
        assert len(london["forecast"]) == 5
        assert atlantis["state"] == "error"
        assert atlantis["cause"] == "http_status:404"


class TestCycleSummary:
    def test_summarizer_counts(self, london_bundle: ForecastBundle):
        summarizer = CycleSummarizer(7)
        summarizer.record_results(_mixed_snapshot(london_bundle).results)
        s = summarizer.finalize(0.12345)

        assert (s.locations, s.succeeded, s.failed) == (2, 1, 1)
        assert s.errors == ["atlantis: http_status:404"]
        assert s.duration_seconds == 0.123

    def test_text(self):
        s = CycleSummary(cycle=2, locations=3, succeeded=2, failed=1, duration_seconds=0.5)
        assert format_cycle_text(s) == "Refresh cycle #2: 3 locations, 2 ok, 1 failed in 0.50s"

    def test_text_discarded(self):
        s = CycleSummary(cycle=2, discarded=True)
        assert "discarded" in format_cycle_text(s)

    def test_json(self):
        s = CycleSummary(cycle=1, locations=1, failed=1, errors=["x: y"])
        data = json.loads(format_cycle_json(s))
        assert data["errors"] == ["x: y"]
