#!/usr/bin/env python3
"""
Spendwise CLI - command-line interface for categorizing transactions.

Usage:
    python -m cli <command> <subcommand> [options]

Commands:
    categories   Manage categories and inspect learned patterns
    transactions Import, label and categorize transactions
    migrate      Database migrations

Examples:
    python -m cli migrate apply
    python -m cli categories seed --user alice
    python -m cli transactions import records.json --user alice
    python -m cli transactions label <transaction-id> "Food & Dining" --user alice
    python -m cli transactions categorize --name "Highlands Coffee" --amount 45000
"""

import sys
import argparse
from cli import transactions, migrate, categories
from config import load_config
from services.base import Services
from db.manager import DatabaseManager
from logger import setup_logging


def main():
    """Main CLI entry point with subcommands."""
    parser = argparse.ArgumentParser(
        prog="cli",
        description="Spendwise - Adaptive transaction categorization",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
        required=True,
    )

    transactions.setup_parser(subparsers)
    categories.setup_parser(subparsers)
    migrate.setup_parser(subparsers)

    args = parser.parse_args()

    if hasattr(args, "func"):
        try:
            config = load_config()
            setup_logging(config)

            # Commands act for the configured user unless --user is given
            if getattr(args, "user", None) is None:
                args.user = config.default_user

            if args.command in ("transactions", "categories"):
                args.func(args, Services(config))
            elif args.command == "migrate":
                # Migrate commands need db_manager for raw database operations
                args.func(args, DatabaseManager(config))
            else:
                args.func(args)
        except Exception as e:
            print(f"Error: {e}")
            sys.exit(1)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
