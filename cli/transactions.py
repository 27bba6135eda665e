#!/usr/bin/env python3

import sys
from datetime import date
from pathlib import Path

from classification import classify_text
from cli.common import format_currency, parse_day, parse_month
from errors import (
    ClassificationError,
    EmptyResultError,
    MalformedPayloadError,
    ValidationError,
)
from llm import get_llm_provider
from logger import get_logger
from models.category import TransactionType
from tools.export import backup_filename, export_filename, format_report, period_range

logger = get_logger()


def cmd_add(args, services):
    """Parse a spending statement and add the resulting transactions.

    Args:
        args: Parsed command-line arguments with text and optional date
        services: Services container with transactions service
    """
    try:
        entry_date = parse_day(args.date) if args.date else date.today()
    except ValueError as e:
        logger.error(f"Invalid date: {e}. Use YYYY/MM/DD format.")
        sys.exit(1)

    try:
        provider = get_llm_provider(services.config)
    except ValueError as e:
        logger.error(str(e))
        sys.exit(1)

    if provider is None:
        logger.error("LLM parsing is disabled. Enable [llm] in ~/.config/spendnote.toml")
        sys.exit(1)

    try:
        transactions = classify_text(
            args.text,
            provider,
            entry_date,
            concurrency=services.config.classify_concurrency,
        )
        services.transactions.add(transactions)
    except (ClassificationError, ValidationError) as e:
        logger.error(f"Nothing was added: {e}")
        logger.info(f"Your input was: {args.text}")
        sys.exit(1)

    logger.info(f"✓ Added {len(transactions)} transaction(s) on {entry_date.isoformat()}")
    for t in transactions:
        logger.info(
            f"  {t.type.value:<10} {t.category.value:<20} "
            f"{format_currency(t.amount):>16}  {t.description}"
        )


def cmd_list(args, services):
    """List transactions for a month, newest first."""
    try:
        if args.month:
            year, month = parse_month(args.month)
        else:
            today = date.today()
            year, month = today.year, today.month
    except ValueError as e:
        logger.error(f"Invalid month: {e}. Use YYYY/MM format.")
        sys.exit(1)

    transactions = services.transactions.find_by_month(year, month)
    if not transactions:
        logger.info(f"No transactions in {year}/{month:02d}.")
        return

    logger.info(f"\nTransactions for {year}/{month:02d}:")
    logger.info("=" * 80)
    for t in transactions:
        sign = "+" if t.type == TransactionType.INCOME else "-"
        logger.info(
            f"{t.date.strftime('%d/%m')}  {t.description[:30]:<30} "
            f"{t.category.value:<20} {sign}{format_currency(t.amount):>15}  [{t.id}]"
        )
    logger.info(f"\nTotal transactions: {len(transactions)}")


def cmd_delete(args, services):
    """Delete a single transaction by ID."""
    if services.transactions.remove(args.transaction_id):
        logger.info("✓ Transaction deleted")
    else:
        logger.info(f"No transaction with ID '{args.transaction_id}', nothing deleted.")


def cmd_clear(args, services):
    """Delete every transaction after confirmation."""
    count = services.transactions.count()
    if count == 0:
        logger.info("No transactions to delete.")
        return

    if not args.yes:
        response = input(f"Delete ALL {count} transaction(s)? (yes/no): ")
        if response.lower() != "yes":
            logger.info("Cancelled.")
            return

    services.transactions.clear()
    logger.info(f"✓ Deleted {count} transaction(s)")


def cmd_export(args, services):
    """Export a CSV report for a month, a year or a custom range.

    Args:
        args: Parsed command-line arguments
        services: Services container with transactions service
    """
    if args.start_date and not args.end_date:
        logger.error("--start-date requires --end-date to be specified")
        sys.exit(1)
    if args.end_date and not args.start_date:
        logger.error("--end-date requires --start-date to be specified")
        sys.exit(1)

    try:
        if args.month:
            year, month = parse_month(args.month)
            period = {"kind": "month", "year": year, "month": month}
        elif args.year:
            period = {"kind": "year", "year": args.year}
        else:
            period = {
                "kind": "custom",
                "start": parse_day(args.start_date),
                "end": parse_day(args.end_date),
            }
        start, end = period_range(**period)
    except (ValueError, IndexError) as e:
        logger.error(f"Invalid date format: {e}")
        logger.error(
            "Use YYYY/MM format for --month or YYYY/MM/DD format for --start-date and --end-date"
        )
        sys.exit(1)

    try:
        report = format_report(services.transactions.all(), start, end)
    except EmptyResultError as e:
        logger.error(f"Nothing to export: {e}")
        sys.exit(1)

    output_dir = Path(args.output_dir) if args.output_dir else services.config.export_dir
    output_path = output_dir / export_filename(**period)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(report, encoding="utf-8")

    logger.info(f"✓ Successfully exported report to: {output_path}")


def cmd_backup(args, services):
    """Write all transactions to a JSON backup file."""
    if args.output:
        output_path = Path(args.output)
    else:
        output_path = services.config.export_dir / backup_filename(date.today())

    count = services.backups.write_backup(output_path)
    logger.info(f"✓ Backed up {count} transaction(s) to: {output_path}")


def cmd_restore(args, services):
    """Replace all transactions with a JSON backup (file or pasted text)."""
    try:
        if args.text is not None:
            parsed = services.backups.parse(args.text)
        else:
            backup_path = Path(args.backup_file)
            if not backup_path.exists():
                logger.error(f"File not found: {args.backup_file}")
                sys.exit(1)
            parsed = services.backups.read_backup(backup_path)
    except MalformedPayloadError as e:
        logger.error(f"Could not read backup: {e}")
        sys.exit(1)
    except ValidationError as e:
        logger.error(f"Backup is not valid transaction data: {e}")
        sys.exit(1)

    if not args.yes:
        response = input(
            f"Found {len(parsed)} transaction(s). Overwrite current data? (yes/no): "
        )
        if response.lower() != "yes":
            logger.info("Restore cancelled.")
            return

    count = services.transactions.replace_all(parsed)
    logger.info(f"✓ Restored {count} transaction(s)")


def setup_parser(subparsers):
    """Setup transactions subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "transactions",
        help="Add and manage transactions",
        description="Add transactions from free text, list, delete, export and back up",
    )

    transactions_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available transaction commands",
        dest="subcommand",
        required=True,
    )

    # transactions add
    add_parser = transactions_subparsers.add_parser(
        "add",
        help="Add transactions from a spending statement",
        epilog="""
Examples:
  python -m cli transactions add "ăn sáng 30k, cafe 45k"
  python -m cli transactions add "lương tháng 10tr" --date 2025/10/01
        """,
    )
    add_parser.add_argument(
        "text",
        help="Statement to parse; separate several transactions with commas",
    )
    add_parser.add_argument(
        "--date",
        help="Date to record the transactions on, YYYY/MM/DD (default: today)",
    )
    add_parser.set_defaults(func=cmd_add)

    # transactions list
    list_parser = transactions_subparsers.add_parser(
        "list", help="List transactions for a month, newest first"
    )
    list_parser.add_argument(
        "--month",
        help="Month in YYYY/MM format (default: current month)",
    )
    list_parser.set_defaults(func=cmd_list)

    # transactions delete
    delete_parser = transactions_subparsers.add_parser(
        "delete", help="Delete a transaction"
    )
    delete_parser.add_argument("transaction_id", help="Transaction ID")
    delete_parser.set_defaults(func=cmd_delete)

    # transactions clear
    clear_parser = transactions_subparsers.add_parser(
        "clear", help="Delete all transactions"
    )
    clear_parser.add_argument(
        "--yes", action="store_true", help="Do not ask for confirmation"
    )
    clear_parser.set_defaults(func=cmd_clear)

    # transactions export
    export_parser = transactions_subparsers.add_parser(
        "export",
        help="Export a CSV report",
        description="Export a CSV report with totals for a month, a year or a date range",
        epilog="""
Examples:
  # Report for October 2025
  python -m cli transactions export --month 2025/10

  # Report for all of 2025
  python -m cli transactions export --year 2025

  # Report for a date range
  python -m cli transactions export --start-date 2025/10/01 --end-date 2025/10/15
        """,
    )

    date_group = export_parser.add_mutually_exclusive_group(required=True)
    date_group.add_argument(
        "--month",
        help="Month to export in YYYY/MM format (e.g., 2025/10 for October 2025)",
    )
    date_group.add_argument(
        "--year",
        type=int,
        help="Year to export (e.g., 2025)",
    )
    date_group.add_argument(
        "--start-date",
        help="Start date in YYYY/MM/DD format. Must be used with --end-date",
    )
    export_parser.add_argument(
        "--end-date",
        help="End date in YYYY/MM/DD format. Must be used with --start-date",
    )
    export_parser.add_argument(
        "--output-dir",
        help="Directory to write the report to (default: configured export_dir)",
    )
    export_parser.set_defaults(func=cmd_export)

    # transactions backup
    backup_parser = transactions_subparsers.add_parser(
        "backup", help="Back up all transactions to a JSON file"
    )
    backup_parser.add_argument(
        "--output",
        help="Backup file path (default: export_dir/backup_<date>.json)",
    )
    backup_parser.set_defaults(func=cmd_backup)

    # transactions restore
    restore_parser = transactions_subparsers.add_parser(
        "restore",
        help="Replace all transactions with a JSON backup",
        epilog="""
Examples:
  python -m cli transactions restore backup_2025-10-31.json
  python -m cli transactions restore --text '[{"date": "2025-10-01", ...}]'
        """,
    )
    source_group = restore_parser.add_mutually_exclusive_group(required=True)
    source_group.add_argument("backup_file", nargs="?", help="Backup file to restore")
    source_group.add_argument("--text", help="Backup JSON pasted as text")
    restore_parser.add_argument(
        "--yes", action="store_true", help="Do not ask for confirmation"
    )
    restore_parser.set_defaults(func=cmd_restore)
