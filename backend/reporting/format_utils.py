"""Consistent formatting for report cells and timestamps. Never render raw floats."""
from __future__ import annotations

from datetime import date, datetime
from typing import Any

EMPTY_CELL = "—"


def format_amount(value: float, currency: str = "Rs", precision: int = 2) -> str:
    return f"{currency} {value:,.{precision}f}"


def format_number(value: float, precision: int = 2) -> str:
    return f"{value:,.{precision}f}"


def format_percent(value: float, precision: int = 1) -> str:
    """value is already a percentage (12.5 -> '12.5%')."""
    return f"{value:.{precision}f}%"


def format_cell(value: Any) -> str:
    """Display text of a table cell. Missing values render as an em-dash."""
    if value is None:
        return EMPTY_CELL
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_long_date(day: date) -> str:
    """e.g. 'January 31, 2025'."""
    return f"{day:%B} {day.day}, {day.year}"


def format_generated_at(moment: datetime) -> str:
    """Long-form timestamp, e.g. 'January 31, 2025 at 02:30 PM'."""
    return f"{format_long_date(moment)} at {moment:%I:%M %p}"
