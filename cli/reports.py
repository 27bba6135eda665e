#!/usr/bin/env python3

import sys
from datetime import date

from cli.common import format_currency, parse_month, resolve_range
from logger import get_logger
from tools.aggregation import (
    calendar_month,
    category_breakdown,
    compute_summary,
    filter_by_range,
    monthly_report,
    timeline,
)

logger = get_logger()


def _range_or_exit(args):
    try:
        return resolve_range(args.start_date, args.end_date, date.today())
    except ValueError as e:
        logger.error(f"Invalid date range: {e}")
        logger.error("Use YYYY/MM/DD format for --start-date and --end-date")
        sys.exit(1)


def cmd_summary(args, services):
    """Show dashboard statistics for a date range."""
    start, end = _range_or_exit(args)
    summary = compute_summary(
        services.transactions.all(),
        start,
        end,
        services.budget.get(),
        date.today(),
    )

    logger.info(f"\nSummary {start.isoformat()} → {end.isoformat()}")
    logger.info("=" * 60)
    logger.info(f"Remaining balance:  {format_currency(summary.remaining_balance)}")
    logger.info(f"  Budget:           {format_currency(summary.monthly_budget)}")
    logger.info(f"  Income:           {format_currency(summary.monthly_income)}")
    logger.info(f"  Expense:          {format_currency(summary.monthly_expense)}")
    logger.info(f"  Saving:           {format_currency(summary.monthly_saving)}")
    logger.info(f"  Investment:       {format_currency(summary.monthly_investment)}")
    logger.info("-" * 60)
    logger.info(f"Net cash flow:      {format_currency(summary.net_cash_flow)}")
    logger.info(
        f"Expense / income:   {summary.expense_ratio}% ({summary.ratio_level})"
    )
    logger.info(f"Average per day:    {format_currency(summary.average_daily)}")
    logger.info(f"Spent today:        {format_currency(summary.daily_total)}")

    if summary.by_category:
        logger.info("\nExpenses by category:")
        for category, total in summary.by_category.items():
            logger.info(f"  {category.value:<22} {format_currency(total):>16}")


def cmd_calendar(args, services):
    """Show income and expense per day for a month."""
    try:
        if args.month:
            year, month = parse_month(args.month)
        else:
            today = date.today()
            year, month = today.year, today.month
    except ValueError as e:
        logger.error(f"Invalid month: {e}. Use YYYY/MM format.")
        sys.exit(1)

    cal = calendar_month(services.transactions.all(), year, month)

    logger.info(f"\nCalendar {year}/{month:02d}")
    logger.info("=" * 60)
    for day, totals in cal.days:
        if not totals.income and not totals.expense:
            continue
        logger.info(
            f"{day:02d}  +{format_currency(totals.income):>16}  "
            f"-{format_currency(totals.expense):>16}"
        )


def cmd_monthly(args, services):
    """Show income, expense, saving and investment per month."""
    report = monthly_report(services.transactions.all())
    if not report:
        logger.info("No transactions yet.")
        return

    logger.info("\nMonthly report")
    logger.info("=" * 80)
    for month_key, totals in report:
        status = "surplus" if totals.is_surplus else "deficit"
        logger.info(
            f"{month_key}  income {format_currency(totals.income):>14}  "
            f"expense {format_currency(totals.expense):>14}  "
            f"saving {format_currency(totals.saving):>14}  "
            f"investment {format_currency(totals.investment):>14}  "
            f"net {format_currency(totals.net):>14} ({status})"
        )


def cmd_timeline(args, services):
    """Show income and expense buckets for a date range."""
    start, end = _range_or_exit(args)
    selected = filter_by_range(services.transactions.all(), start, end)
    buckets = timeline(selected, services.config.timeline_daily_threshold_days)

    if not buckets:
        logger.info("No transactions in range.")
        return

    logger.info(f"\nTimeline ({buckets[0].granularity}ly)")
    logger.info("=" * 60)
    for bucket in buckets:
        logger.info(
            f"{bucket.key:<10}  +{format_currency(bucket.income):>16}  "
            f"-{format_currency(bucket.expense):>16}"
        )


def cmd_categories(args, services):
    """Show expense totals per category for a date range."""
    start, end = _range_or_exit(args)
    selected = filter_by_range(services.transactions.all(), start, end)
    breakdown = category_breakdown(selected)

    if not breakdown:
        logger.info("No expenses in range.")
        return

    logger.info("\nExpenses by category")
    logger.info("=" * 60)
    for category, total in breakdown:
        logger.info(f"{category.value:<22} {format_currency(total):>16}")


def _add_range_arguments(parser):
    parser.add_argument(
        "--start-date",
        help="Start date in YYYY/MM/DD format (default: first day of this month)",
    )
    parser.add_argument(
        "--end-date",
        help="End date in YYYY/MM/DD format (default: today)",
    )


def setup_parser(subparsers):
    """Setup reports subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "reports",
        help="Summaries, calendar and monthly reports",
        description="Aggregated views of your transactions",
    )

    reports_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available reports",
        dest="subcommand",
        required=True,
    )

    summary_parser = reports_subparsers.add_parser(
        "summary", help="Dashboard statistics for a date range"
    )
    _add_range_arguments(summary_parser)
    summary_parser.set_defaults(func=cmd_summary)

    calendar_parser = reports_subparsers.add_parser(
        "calendar", help="Daily income and expense for a month"
    )
    calendar_parser.add_argument(
        "--month", help="Month in YYYY/MM format (default: current month)"
    )
    calendar_parser.set_defaults(func=cmd_calendar)

    monthly_parser = reports_subparsers.add_parser(
        "monthly", help="Per-month totals over the full history"
    )
    monthly_parser.set_defaults(func=cmd_monthly)

    timeline_parser = reports_subparsers.add_parser(
        "timeline", help="Income and expense by day or month"
    )
    _add_range_arguments(timeline_parser)
    timeline_parser.set_defaults(func=cmd_timeline)

    categories_parser = reports_subparsers.add_parser(
        "categories", help="Expense totals per category"
    )
    _add_range_arguments(categories_parser)
    categories_parser.set_defaults(func=cmd_categories)
