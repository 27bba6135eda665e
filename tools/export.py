"""CSV report export.

Formatting only: writing the text to disk is left to the caller.
"""

import csv
import io
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Tuple

from dateutil.relativedelta import relativedelta

from errors import EmptyResultError, ValidationError
from models.category import TransactionType
from tools.aggregation import filter_by_range, sum_by_type
from models.transaction import Transaction

EXPORT_KINDS = ("month", "year", "custom")

REPORT_HEADER = ["Date", "Description", "Type", "Category", "Amount"]

_TOTAL_LABELS = [
    ("Total income", TransactionType.INCOME),
    ("Total expense", TransactionType.EXPENSE),
    ("Total saving", TransactionType.SAVING),
    ("Total investment", TransactionType.INVESTMENT),
]

# Byte-order mark so spreadsheet tools detect UTF-8
BOM = "\ufeff"


def format_amount(amount: Decimal) -> str:
    """Render an amount without exponent notation or trailing '.0'."""
    if amount == amount.to_integral_value():
        return format(amount.to_integral_value(), "f")
    return format(amount.normalize(), "f")


def format_report(transactions: Iterable[Transaction], start: date, end: date) -> str:
    """Format transactions in [start, end] as a CSV report.

    Body rows are in ascending date order, followed by a blank row and the
    income, expense, saving and investment totals for the range.

    Args:
        transactions: All transactions.
        start: Range start (inclusive).
        end: Range end (inclusive).

    Returns:
        CSV text prefixed with a UTF-8 byte-order mark.

    Raises:
        EmptyResultError: If no transactions fall within the range.
    """
    selected = filter_by_range(transactions, start, end)
    if not selected:
        raise EmptyResultError(
            f"No transactions between {start.isoformat()} and {end.isoformat()}"
        )

    selected = sorted(selected, key=lambda t: t.date)
    totals = sum_by_type(selected)

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(REPORT_HEADER)

    for t in selected:
        writer.writerow(
            [
                t.date.isoformat(),
                t.description.replace(",", " "),
                t.type.value,
                t.category.value,
                format_amount(t.amount),
            ]
        )

    writer.writerow([])
    for label, transaction_type in _TOTAL_LABELS:
        writer.writerow([label, "", "", "", format_amount(totals[transaction_type])])

    return BOM + buffer.getvalue()


def _check_kind(kind: str) -> None:
    if kind not in EXPORT_KINDS:
        raise ValidationError(
            f"Unknown export kind: {kind} (expected one of {', '.join(EXPORT_KINDS)})"
        )


def period_range(
    kind: str,
    year: Optional[int] = None,
    month: Optional[int] = None,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> Tuple[date, date]:
    """Resolve an export period to an inclusive date range.

    Args:
        kind: 'month', 'year' or 'custom'.
        year: Year for 'month' and 'year' exports.
        month: Month (1-12) for 'month' exports.
        start: Range start for 'custom' exports.
        end: Range end for 'custom' exports.

    Returns:
        Tuple of (start, end) dates.

    Raises:
        ValidationError: If the arguments required by the kind are missing.
    """
    _check_kind(kind)

    if kind == "month":
        if year is None or month is None:
            raise ValidationError("Month export requires a year and a month")
        if month < 1 or month > 12:
            raise ValidationError("Month must be between 1 and 12")
        first = date(year, month, 1)
        return first, first + relativedelta(day=31)

    if kind == "year":
        if year is None:
            raise ValidationError("Year export requires a year")
        return date(year, 1, 1), date(year, 12, 31)

    if start is None or end is None:
        raise ValidationError("Custom export requires both a start and an end date")
    return start, end


def export_filename(
    kind: str,
    year: Optional[int] = None,
    month: Optional[int] = None,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> str:
    """Suggested file name for a report export."""
    _check_kind(kind)
    name = f"Report_{kind}"
    if kind == "month":
        name += f"_{month}_{year}"
    elif kind == "year":
        name += f"_{year}"
    else:
        name += f"_from_{start.isoformat()}_to_{end.isoformat()}"
    return f"{name}.csv"


def backup_filename(today: date) -> str:
    return f"backup_{today.isoformat()}.json"
