"""Transaction aggregation tools.

Every function here is pure: it reads the transactions it is given, never
mutates them, and relies on no ordering of the input.
"""

import calendar
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Tuple

from models.category import Category, NON_EXPENSE_CATEGORIES, TransactionType
from models.report import (
    CalendarMonth,
    DayTotals,
    MonthTotals,
    Summary,
    TimelineBucket,
)
from models.transaction import Transaction

DAILY_THRESHOLD_DAYS = 35


def filter_by_range(
    transactions: Iterable[Transaction], start: date, end: date
) -> List[Transaction]:
    """Get transactions dated within [start, end], both ends inclusive."""
    return [t for t in transactions if start <= t.date <= end]


def sum_by_type(transactions: Iterable[Transaction]) -> Dict[TransactionType, Decimal]:
    """Sum amounts per transaction type.

    Returns:
        Dictionary with one entry per TransactionType member, so every
        transaction is counted exactly once.
    """
    totals = {t: Decimal("0") for t in TransactionType}
    for transaction in transactions:
        totals[transaction.type] += transaction.amount
    return totals


def days_inclusive(start: date, end: date) -> int:
    """Number of days in a range counting both endpoints.

    A reversed range is measured by its absolute span.
    """
    return abs((end - start).days) + 1


def compute_summary(
    transactions: Iterable[Transaction],
    start: date,
    end: date,
    monthly_budget: Decimal,
    today: date,
) -> Summary:
    """Compute dashboard statistics for a date range.

    Args:
        transactions: All transactions.
        start: Range start (inclusive).
        end: Range end (inclusive).
        monthly_budget: Budget the remaining balance is computed against.
        today: Date used for the daily total, regardless of the range.

    Returns:
        Summary with per-type totals for the range, the remaining balance,
        average daily expense, today's expense and expenses by category.
    """
    transactions = list(transactions)
    in_range = filter_by_range(transactions, start, end)
    totals = sum_by_type(in_range)

    expense = totals[TransactionType.EXPENSE]
    income = totals[TransactionType.INCOME]
    saving = totals[TransactionType.SAVING]
    investment = totals[TransactionType.INVESTMENT]

    by_category: Dict[Category, Decimal] = {}
    for transaction in in_range:
        if transaction.type == TransactionType.EXPENSE:
            by_category[transaction.category] = (
                by_category.get(transaction.category, Decimal("0"))
                + transaction.amount
            )

    daily_total = sum(
        (
            t.amount
            for t in transactions
            if t.date == today and t.type == TransactionType.EXPENSE
        ),
        Decimal("0"),
    )

    return Summary(
        daily_total=daily_total,
        monthly_expense=expense,
        monthly_income=income,
        monthly_saving=saving,
        monthly_investment=investment,
        monthly_budget=monthly_budget,
        remaining_balance=(monthly_budget + income) - (expense + saving + investment),
        average_daily=expense / max(1, days_inclusive(start, end)),
        by_category={c: v for c, v in by_category.items() if v != 0},
    )


def daily_rollup(
    transactions: Iterable[Transaction], year: int, month: int, day: int
) -> DayTotals:
    """Income and expense totals for a single calendar day.

    Savings and investments are allocations, not cash in or out, so they are
    left out.
    """
    target = date(year, month, day)
    totals = DayTotals()
    for transaction in transactions:
        if transaction.date != target:
            continue
        if transaction.type == TransactionType.INCOME:
            totals.income += transaction.amount
        elif transaction.type == TransactionType.EXPENSE:
            totals.expense += transaction.amount
    return totals


def calendar_month(
    transactions: Iterable[Transaction], year: int, month: int
) -> CalendarMonth:
    """Day totals for every day of a month, ready for a calendar grid.

    Args:
        transactions: All transactions.
        year: Year (e.g., 2025).
        month: Month (1-12).

    Returns:
        CalendarMonth whose leading_blanks is the number of empty cells before
        day 1 in a Monday-first week, and whose days holds one entry per day.
    """
    first_weekday, last_day = calendar.monthrange(year, month)
    prefix = f"{year:04d}-{month:02d}"
    in_month = [t for t in transactions if t.month_key == prefix]

    days = [
        (day, daily_rollup(in_month, year, month, day))
        for day in range(1, last_day + 1)
    ]
    return CalendarMonth(
        year=year, month=month, leading_blanks=first_weekday, days=days
    )


def monthly_report(transactions: Iterable[Transaction]) -> List[Tuple[str, MonthTotals]]:
    """Per-month totals of all four types across the full history.

    Returns:
        List of (month_key, MonthTotals) pairs, most recent month first.

    Example:
        [
            ("2024-03", MonthTotals(income=..., expense=..., ...)),
            ("2024-02", MonthTotals(...)),
        ]
    """
    months: Dict[str, MonthTotals] = {}
    for transaction in transactions:
        totals = months.setdefault(transaction.month_key, MonthTotals())
        if transaction.type == TransactionType.INCOME:
            totals.income += transaction.amount
        elif transaction.type == TransactionType.EXPENSE:
            totals.expense += transaction.amount
        elif transaction.type == TransactionType.SAVING:
            totals.saving += transaction.amount
        elif transaction.type == TransactionType.INVESTMENT:
            totals.investment += transaction.amount
        else:
            raise ValueError(f"Unhandled transaction type: {transaction.type}")

    return sorted(months.items(), key=lambda item: item[0], reverse=True)


def timeline(
    transactions: Iterable[Transaction],
    daily_threshold_days: int = DAILY_THRESHOLD_DAYS,
) -> List[TimelineBucket]:
    """Income/expense buckets for charting, with adaptive granularity.

    The input is expected to be already filtered to the range being charted.
    When the data spans at most ``daily_threshold_days`` days there is one
    bucket per date that has transactions; otherwise one bucket per month
    that has transactions. Buckets are in ascending order. Days or months
    without transactions get no bucket.
    """
    transactions = list(transactions)
    if not transactions:
        return []

    dates = [t.date for t in transactions]
    span = (max(dates) - min(dates)).days

    if span <= daily_threshold_days:
        granularity = "day"

        def key_of(t: Transaction) -> str:
            return t.date.isoformat()

    else:
        granularity = "month"

        def key_of(t: Transaction) -> str:
            return t.month_key

    buckets: Dict[str, TimelineBucket] = {}
    for transaction in transactions:
        key = key_of(transaction)
        bucket = buckets.setdefault(key, TimelineBucket(key, granularity))
        if transaction.type == TransactionType.INCOME:
            bucket.income += transaction.amount
        elif transaction.type == TransactionType.EXPENSE:
            bucket.expense += transaction.amount

    return [buckets[key] for key in sorted(buckets)]


def category_breakdown(transactions: Iterable[Transaction]) -> List[Tuple[Category, Decimal]]:
    """Expense totals per expense category.

    Only expense-typed records count, and the income, saving and investment
    categories are skipped even if a record pairs them with the expense
    type. Categories with a zero total are omitted.

    Returns:
        List of (Category, total) pairs in category declaration order.
    """
    totals = {c: Decimal("0") for c in Category if c not in NON_EXPENSE_CATEGORIES}
    for transaction in transactions:
        if transaction.type != TransactionType.EXPENSE:
            continue
        if transaction.category in totals:
            totals[transaction.category] += transaction.amount

    return [(c, total) for c, total in totals.items() if total > 0]
