"""Output formatters for dashboard state and cycle summaries."""

import json

from weatherboard.models.dashboard import DashboardState
from weatherboard.models.display import DisplayModel, DisplayState
from weatherboard.models.reporting import CycleSummary

ICON_GLYPHS = {
    "thunderstorm": "⛈",
    "drizzle": "🌦",
    "rain": "🌧",
    "snow": "❄",
    "clear": "☀",
    "cloud": "☁",
    "fog": "🌫",
}


def format_cycle_text(s: CycleSummary) -> str:
    """Single-line cycle summary for logging."""
    line = (
        f"Refresh cycle #{s.cycle}: {s.locations} locations, "
        f"{s.succeeded} ok, {s.failed} failed in {s.duration_seconds:.2f}s"
    )
    if s.discarded:
        line += " (superseded, discarded)"
    return line


def format_cycle_json(s: CycleSummary) -> str:
    data = {
        "cycle": s.cycle,
        "locations": s.locations,
        "succeeded": s.succeeded,
        "failed": s.failed,
        "duration_seconds": s.duration_seconds,
        "discarded": s.discarded,
        "errors": s.errors,
    }
    return json.dumps(data, indent=2)


def format_card_text(card: DisplayModel) -> str:
    lines = [f"[{card.location}]"]
    if card.state == DisplayState.LOADING:
        lines.append("  Loading weather data...")
    elif card.state == DisplayState.ERROR:
        lines.append(f"  {card.error}")
    elif card.state == DisplayState.NO_DATA or card.current is None:
        lines.append("  No data available")
    else:
        cur = card.current
        sym = card.unit_symbol
        lines += [
            f"  {ICON_GLYPHS.get(cur.icon.value, '?')} {cur.description}",
            f"  Temperature: {cur.temperature:.1f}{sym}",
            f"  Humidity: {cur.humidity_pct}%",
            f"  Wind Speed: {cur.wind_speed_ms} m/s",
            f"  Last Updated: {cur.updated_at}",
        ]
        for entry in card.forecast:
            lines.append(
                f"    {entry.date}  {entry.temperature:5.1f}{sym}  {entry.description}"
            )
    return "\n".join(lines)


def format_dashboard_text(state: DashboardState) -> str:
    """Plain text rendering of every tracked location card."""
    lines = ["=== Weather Dashboard ==="]
    if state.notice:
        lines.append(f"! {state.notice}")
    if not state.locations:
        lines.append("No cities added yet. Add a city to get started!")
        return "\n".join(lines)
    if state.stale and not state.loading:
        lines.append("(data may be out of date)")
    if not state.persisted:
        lines.append("(location list is not being saved this session)")
    for card in state.cards:
        lines.append(format_card_text(card))
    return "\n".join(lines)


def format_dashboard_json(state: DashboardState) -> str:
    """JSON rendering for programmatic consumption."""
    cards = []
    for card in state.cards:
        result = state.snapshot.get(card.location)
        entry: dict = {
            "location": card.location,
            "state": card.state.value,
            "unit": card.unit.value,
        }
        if card.error is not None:
            entry["error"] = card.error
            entry["cause"] = getattr(result, "cause", "")
        if card.current is not None:
            cur = card.current
            entry["current"] = {
                "icon": cur.icon.value,
                "temperature": round(cur.temperature, 2),
                "description": cur.description,
                "humidity_pct": cur.humidity_pct,
                "wind_speed_ms": cur.wind_speed_ms,
                "updated_at": cur.updated_at,
            }
            entry["forecast"] = [
                {
                    "date": f.date,
                    "description": f.description,
                    "temperature": round(f.temperature, 2),
                }
                for f in card.forecast
            ]
        cards.append(entry)
    data = {
        "locations": list(state.locations),
        "unit": state.unit.value,
        "loading": state.loading,
        "stale": state.stale,
        "cycle": state.snapshot.cycle,
        "completed_at": state.snapshot.completed_at,
        "notice": state.notice,
        "cards": cards,
    }
    return json.dumps(data, indent=2, ensure_ascii=False)
