#!/usr/bin/env python3

from logger import get_logger

logger = get_logger()


def cmd_status(args, db_manager):
    """Show which schema migrations are applied and which are pending."""
    if not db_manager.get_db_path().exists():
        logger.info("No database yet. It is created by 'spendnote migrate apply'")
        logger.info("or by running any other command.")
        return

    available = db_manager.available_migrations()
    if not available:
        logger.info("No migrations found.")
        return

    applied = db_manager.applied_migrations()
    pending = [m for m in available if m not in applied]

    logger.info(f"\nDatabase: {db_manager.get_db_path()}")
    logger.info("=" * 60)
    for migration in available:
        logger.info(f"  [{'x' if migration in applied else ' '}] {migration}")
    logger.info(f"\n{len(available) - len(pending)} applied, {len(pending)} pending")


def cmd_apply(args, db_manager):
    """Apply pending migrations."""
    applied = db_manager.apply_pending_migrations()

    if applied:
        logger.info(f"✓ Applied {len(applied)} migration(s): {', '.join(applied)}")
    else:
        logger.info("Database schema is up to date.")


def setup_parser(subparsers):
    """Setup migrate subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "migrate",
        help="Database migrations",
        description="Inspect and apply schema migrations for the spendnote database",
    )

    migrate_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available migration commands",
        dest="subcommand",
        required=True,
    )

    migrate_subparsers.add_parser(
        "status", help="List applied and pending migrations"
    ).set_defaults(func=cmd_status)

    migrate_subparsers.add_parser(
        "apply", help="Apply pending migrations"
    ).set_defaults(func=cmd_apply)
