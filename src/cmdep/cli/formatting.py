"""Shared formatting helpers for CLI commands."""

from __future__ import annotations

from rich.text import Text


_STATUS_COLORS = {"cached": "green", "missing": "red"}


def _format_status_with_color(status: str) -> Text:
    """Format status string with color coding.

    Args:
        status: Status string ("cached" or "missing")

    Returns:
        Rich Text object: "cached" -> green, "missing" -> red.
    """
    color = _STATUS_COLORS.get(status)
    return Text(status, style=color) if color else Text(status)
