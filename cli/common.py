"""Argument parsing and display helpers shared by CLI commands."""

from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Tuple


def parse_month(value: str) -> Tuple[int, int]:
    """Parse a month in YYYY/MM format.

    Raises:
        ValueError: If the value is malformed or the month is out of range.
    """
    year, month = value.split("/")
    year, month = int(year), int(month)
    if month < 1 or month > 12:
        raise ValueError("Month must be between 1 and 12")
    return year, month


def parse_day(value: str) -> date:
    """Parse a date in YYYY/MM/DD format.

    Raises:
        ValueError: If the value is malformed or not a real date.
    """
    year, month, day = value.split("/")
    return date(int(year), int(month), int(day))


def resolve_range(
    start: Optional[str], end: Optional[str], today: date
) -> Tuple[date, date]:
    """Resolve --start-date/--end-date, defaulting to month-to-date.

    Raises:
        ValueError: If only one bound is given or a date is malformed.
    """
    if start and not end:
        raise ValueError("--start-date requires --end-date to be specified")
    if end and not start:
        raise ValueError("--end-date requires --start-date to be specified")
    if start and end:
        return parse_day(start), parse_day(end)
    return today.replace(day=1), today


def format_currency(amount: Decimal) -> str:
    """Format an amount with dot thousands separators, e.g. 1.500.000 ₫."""
    rounded = amount.to_integral_value(rounding=ROUND_HALF_UP)
    return format(rounded, ",f").replace(",", ".") + " ₫"
