"""Derived views computed from transactions."""

from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Tuple

from models.category import Category

ZERO = Decimal("0")


@dataclass
class Summary:
    """Dashboard statistics for a date range.

    Attributes:
        daily_total: Expenses dated today, independent of the range.
        monthly_expense: Expense total within the range.
        monthly_income: Income total within the range.
        monthly_saving: Saving total within the range.
        monthly_investment: Investment total within the range.
        monthly_budget: Budget the balance is computed against.
        remaining_balance: (budget + income) - (expense + saving + investment).
        average_daily: Expense total divided by the inclusive day span.
        by_category: Expense totals per category, zero totals omitted.
    """

    daily_total: Decimal
    monthly_expense: Decimal
    monthly_income: Decimal
    monthly_saving: Decimal
    monthly_investment: Decimal
    monthly_budget: Decimal
    remaining_balance: Decimal
    average_daily: Decimal
    by_category: Dict[Category, Decimal] = field(default_factory=dict)

    @property
    def net_cash_flow(self) -> Decimal:
        """Income minus expense, ignoring savings and investments."""
        return self.monthly_income - self.monthly_expense

    @property
    def expense_ratio(self) -> int:
        """Expense as a whole percentage of income.

        Spending with no income counts as 100; no activity counts as 0.
        """
        if self.monthly_income > 0:
            ratio = self.monthly_expense / self.monthly_income * 100
            return int(ratio.to_integral_value(rounding=ROUND_HALF_UP))
        if self.monthly_expense > 0:
            return 100
        return 0

    @property
    def ratio_level(self) -> str:
        """Warning level for the expense ratio: low, medium or high."""
        ratio = self.expense_ratio
        if ratio > 80:
            return "high"
        if ratio > 50:
            return "medium"
        return "low"


@dataclass
class DayTotals:
    income: Decimal = ZERO
    expense: Decimal = ZERO


@dataclass
class CalendarMonth:
    """One month of day totals laid out for a Monday-first calendar grid."""

    year: int
    month: int
    leading_blanks: int
    days: List[Tuple[int, DayTotals]]


@dataclass
class MonthTotals:
    income: Decimal = ZERO
    expense: Decimal = ZERO
    saving: Decimal = ZERO
    investment: Decimal = ZERO

    @property
    def outflow(self) -> Decimal:
        return self.expense + self.saving + self.investment

    @property
    def net(self) -> Decimal:
        return self.income - self.outflow

    @property
    def is_surplus(self) -> bool:
        return self.income >= self.outflow


@dataclass
class TimelineBucket:
    """Income and expense for one day (YYYY-MM-DD) or month (YYYY-MM)."""

    key: str
    granularity: str  # 'day' or 'month'
    income: Decimal = ZERO
    expense: Decimal = ZERO
