#!/usr/bin/env python3

import sys

from cli.common import format_currency
from errors import ValidationError
from logger import get_logger

logger = get_logger()


def cmd_show(args, services):
    """Show the monthly budget."""
    logger.info(f"Monthly budget: {format_currency(services.budget.get())}")


def cmd_set(args, services):
    """Set the monthly budget."""
    try:
        budget = services.budget.set(args.amount)
    except ValidationError as e:
        logger.error(str(e))
        sys.exit(1)

    logger.info(f"✓ Monthly budget set to {format_currency(budget)}")


def setup_parser(subparsers):
    """Setup budget subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "budget",
        help="Manage the monthly budget",
        description="The budget is added to income when computing the remaining balance",
    )

    budget_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available budget commands",
        dest="subcommand",
        required=True,
    )

    show_parser = budget_subparsers.add_parser("show", help="Show the monthly budget")
    show_parser.set_defaults(func=cmd_show)

    set_parser = budget_subparsers.add_parser("set", help="Set the monthly budget")
    set_parser.add_argument("amount", help="Budget amount, e.g. 5000000")
    set_parser.set_defaults(func=cmd_set)
