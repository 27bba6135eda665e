#!/usr/bin/env python3
"""
spendnote CLI - Track spending from free-text statements.

Usage:
    spendnote <command> <subcommand> [options]
    python -m cli <command> <subcommand> [options]

Commands:
    transactions Add, list, delete, export and back up transactions
    reports      Summary, calendar, monthly report, timeline, categories
    budget       Monthly budget
    migrate      Database migrations

Examples:
    spendnote transactions add "ăn sáng 30k, cafe 45k"
    spendnote reports summary --start-date 2025/10/01 --end-date 2025/10/31
    spendnote transactions export --month 2025/10
    spendnote budget set 5000000
"""

import sys
import argparse
from cli import budget, migrate, reports, transactions
from config import load_config
from services.base import Services
from db.manager import DatabaseManager
from logger import get_logger, setup_logging

COMMAND_MODULES = (transactions, reports, budget, migrate)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="spendnote",
        description=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
        required=True,
    )
    for module in COMMAND_MODULES:
        module.setup_parser(subparsers)

    return parser


def main(argv=None):
    """Main CLI entry point with subcommands."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        sys.exit(1)

    try:
        config = load_config()
        setup_logging(config)
        db_manager = DatabaseManager(config)

        if args.command == "migrate":
            # Migrate commands work on the raw database, before any data is loaded
            args.func(args, db_manager)
            return

        db_manager.apply_pending_migrations()
        services = Services(config, db_manager=db_manager).load()
        args.func(args, services)
    except KeyboardInterrupt:
        sys.exit(130)
    except Exception as e:
        get_logger().error(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
