"""Shared formatting helpers for the dashboard."""

from __future__ import annotations

from datetime import timedelta


def format_duration(delta: timedelta | None) -> str:
    """Format a duration as a compact string like '2h 5m', '45s'."""
    if delta is None:
        return "-"
    secs = int(delta.total_seconds())
    if secs < 0:
        return "-"
    if secs < 60:
        return f"{secs}s"
    if secs < 3600:
        return f"{secs // 60}m {secs % 60}s"
    if secs < 86400:
        return f"{secs // 3600}h {(secs % 3600) // 60}m"
    return f"{secs // 86400}d {(secs % 86400) // 3600}h"


def last_reload_text(seconds: float | None) -> str:
    """Header text for the time since the last successful reload."""
    if seconds is None:
        return "Last reload: N/A"
    return f"Last reload: {int(seconds)}s ago"


def truncate(text: str, width: int) -> str:
    if len(text) <= width:
        return text
    return text[: max(0, width - 1)] + "…"
