"""Formatting helpers and table rows for the dashboard page."""

from treasury_dashboard.presentation.formatting import (
    ChangeDirection,
    ChangeLabel,
    IconComposition,
    capitalize,
    classify_change,
    compose_icons,
    format_number,
    format_usd,
    initials,
)
from treasury_dashboard.presentation.rows import DashboardRows, build_rows

__all__ = [
    "ChangeDirection",
    "ChangeLabel",
    "DashboardRows",
    "IconComposition",
    "build_rows",
    "capitalize",
    "classify_change",
    "compose_icons",
    "format_number",
    "format_usd",
    "initials",
]
