"""Tests for CSV report export."""

import csv
import io
from datetime import date
from decimal import Decimal

import pytest

from errors import EmptyResultError, ValidationError
from models.category import Category, TransactionType
from tests.helpers import make_transaction
from tools.export import (
    BOM,
    backup_filename,
    export_filename,
    format_amount,
    format_report,
    period_range,
)


def read_rows(text):
    assert text.startswith(BOM)
    return list(csv.reader(io.StringIO(text[len(BOM):])))


class TestFormatReport:
    """Tests for format_report function."""

    def test_empty_range_is_refused(self):
        """Test no output is produced when nothing falls in the range."""
        transactions = [make_transaction("2024-04-30", 100)]

        with pytest.raises(EmptyResultError):
            format_report(transactions, date(2024, 5, 1), date(2024, 5, 31))

    def test_empty_store_is_refused(self):
        with pytest.raises(EmptyResultError):
            format_report([], date(2024, 5, 1), date(2024, 5, 31))

    def test_starts_with_bom_and_header(self):
        transactions = [make_transaction("2024-05-01", 100)]

        rows = read_rows(format_report(transactions, date(2024, 5, 1), date(2024, 5, 31)))

        assert rows[0] == ["Date", "Description", "Type", "Category", "Amount"]

    def test_rows_sorted_by_date(self):
        """Test body rows are in ascending date order regardless of input order."""
        transactions = [
            make_transaction("2024-05-20", 3, description="late"),
            make_transaction("2024-05-01", 1, description="early"),
            make_transaction("2024-05-10", 2, description="middle"),
        ]

        rows = read_rows(format_report(transactions, date(2024, 5, 1), date(2024, 5, 31)))

        assert [row[1] for row in rows[1:4]] == ["early", "middle", "late"]

    def test_row_contents(self):
        transactions = [
            make_transaction(
                "2024-05-03", 45000, TransactionType.EXPENSE, Category.HANG_OUT, "cafe"
            )
        ]

        rows = read_rows(format_report(transactions, date(2024, 5, 1), date(2024, 5, 31)))

        assert rows[1] == ["2024-05-03", "cafe", "expense", "Đi chơi & Giải trí", "45000"]

    def test_commas_in_description_replaced(self):
        """Test commas never reach the description column."""
        transactions = [make_transaction("2024-05-03", 1, description="bread, milk,eggs")]

        text = format_report(transactions, date(2024, 5, 1), date(2024, 5, 31))
        rows = read_rows(text)

        assert rows[1][1] == "bread  milk eggs"
        assert '"' not in text

    def test_out_of_range_rows_excluded(self):
        transactions = [
            make_transaction("2024-05-03", 1, description="in"),
            make_transaction("2024-06-03", 1, description="out"),
        ]

        rows = read_rows(format_report(transactions, date(2024, 5, 1), date(2024, 5, 31)))

        descriptions = [row[1] for row in rows if len(row) > 1]
        assert "in" in descriptions
        assert "out" not in descriptions

    def test_totals_follow_blank_row(self):
        """Test the four type totals appear after a blank separator row."""
        transactions = [
            make_transaction("2024-05-01", 1000000, TransactionType.INCOME, Category.INCOME),
            make_transaction("2024-05-02", 30000, TransactionType.EXPENSE, Category.FOOD),
            make_transaction("2024-05-03", 20000, TransactionType.EXPENSE, Category.SHOPPING),
            make_transaction("2024-05-04", 50000, TransactionType.SAVING, Category.SAVING),
        ]

        rows = read_rows(format_report(transactions, date(2024, 5, 1), date(2024, 5, 31)))

        assert rows[5] == []
        assert rows[6] == ["Total income", "", "", "", "1000000"]
        assert rows[7] == ["Total expense", "", "", "", "50000"]
        assert rows[8] == ["Total saving", "", "", "", "50000"]
        assert rows[9] == ["Total investment", "", "", "", "0"]
        assert len(rows) == 10

    def test_does_not_mutate_input(self):
        transactions = [
            make_transaction("2024-05-20", 1),
            make_transaction("2024-05-01", 1),
        ]
        snapshot = list(transactions)

        format_report(transactions, date(2024, 5, 1), date(2024, 5, 31))

        assert transactions == snapshot


class TestFormatAmount:
    """Tests for format_amount function."""

    def test_integral(self):
        assert format_amount(Decimal("45000")) == "45000"

    def test_integral_with_exponent(self):
        assert format_amount(Decimal("1E+5")) == "100000"

    def test_fractional(self):
        assert format_amount(Decimal("12.50")) == "12.5"

    def test_beyond_context_precision(self):
        """Test large totals render in full instead of raising."""
        assert format_amount(Decimal("1E+30")) == "1" + "0" * 30

    def test_integral_with_trailing_zeros(self):
        assert format_amount(Decimal("45000.00")) == "45000"


class TestPeriodRange:
    """Tests for period_range function."""

    def test_month(self):
        assert period_range("month", year=2024, month=2) == (
            date(2024, 2, 1),
            date(2024, 2, 29),
        )

    def test_month_end_of_year(self):
        assert period_range("month", year=2024, month=12) == (
            date(2024, 12, 1),
            date(2024, 12, 31),
        )

    def test_year(self):
        assert period_range("year", year=2025) == (date(2025, 1, 1), date(2025, 12, 31))

    def test_custom(self):
        start, end = date(2024, 5, 3), date(2024, 6, 9)

        assert period_range("custom", start=start, end=end) == (start, end)

    def test_custom_requires_both_dates(self):
        with pytest.raises(ValidationError):
            period_range("custom", start=date(2024, 5, 3))

    def test_month_requires_month(self):
        with pytest.raises(ValidationError):
            period_range("month", year=2024)

    def test_invalid_month(self):
        with pytest.raises(ValidationError):
            period_range("month", year=2024, month=13)

    def test_unknown_kind(self):
        with pytest.raises(ValidationError):
            period_range("week", year=2024)


class TestFilenames:
    """Tests for export and backup file names."""

    def test_month(self):
        assert export_filename("month", year=2025, month=10) == "Report_month_10_2025.csv"

    def test_year(self):
        assert export_filename("year", year=2025) == "Report_year_2025.csv"

    def test_custom(self):
        name = export_filename("custom", start=date(2025, 1, 5), end=date(2025, 2, 1))

        assert name == "Report_custom_from_2025-01-05_to_2025-02-01.csv"

    def test_unknown_kind(self):
        with pytest.raises(ValidationError):
            export_filename("week")

    def test_backup(self):
        assert backup_filename(date(2025, 10, 3)) == "backup_2025-10-03.json"
