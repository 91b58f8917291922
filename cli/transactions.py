#!/usr/bin/env python3

import sys
import json
import argparse
from decimal import Decimal, InvalidOperation
from pathlib import Path
from models.transaction import Transaction
from logger import get_logger

logger = get_logger()


def cmd_import(args, services):
    """Import structured transaction records and categorize the new ones.

    The input is a JSON list of records as produced by the bank-email
    extractor (beneficiaryName, beneficiaryAccount, remark, amount,
    transactionTime, referenceNumber).

    Args:
        args: Parsed command-line arguments with json_file and user
        services: Services container
    """
    json_path = Path(args.json_file)
    if not json_path.exists():
        logger.error(f"File not found: {args.json_file}")
        sys.exit(1)

    try:
        with open(json_path, "r", encoding="utf-8") as f:
            records = json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f"Error parsing JSON file: {e}")
        sys.exit(1)

    if not isinstance(records, list):
        logger.error("Expected a JSON list of transaction records.")
        sys.exit(1)

    logger.info(f"Importing {len(records)} record(s) for user '{args.user}'")
    logger.info("-" * 80)

    # Make sure the user has somewhere to put rule/remote results
    services.categories.ensure_defaults(args.user)

    new_transactions = []
    skipped_count = 0
    sources = {}

    for index, record in enumerate(records, start=1):
        try:
            transaction = Transaction.from_record(record, args.user)
        except (ValueError, TypeError, InvalidOperation) as e:
            logger.error(f"Record {index}: invalid record ({e})")
            skipped_count += 1
            continue

        if services.transactions.exists(transaction.id):
            logger.info(f"⊘ Record {index}: already imported ({transaction.id[:12]})")
            skipped_count += 1
            continue

        result = services.categorizer.categorize_with_source(args.user, transaction)
        transaction.category = result.category
        sources[result.source] = sources.get(result.source, 0) + 1
        new_transactions.append(transaction)

        logger.info(
            f"✓ {transaction.beneficiary_name or '-'} | {transaction.amount:,.0f} "
            f"-> {result.category} ({result.source})"
        )

    inserted = services.transactions.bulk_create(new_transactions)

    logger.info("=" * 80)
    logger.info(f"Imported: {inserted}")
    logger.info(f"Skipped: {skipped_count}")
    for source, count in sorted(sources.items()):
        logger.info(f"  categorized by {source}: {count}")


def cmd_list(args, services):
    """List the user's transactions."""
    transactions = services.transactions.find_by_user(args.user, category=args.category)

    if not transactions:
        logger.info("No transactions found.")
        return

    for txn in transactions[: args.limit]:
        when = txn.transaction_time.strftime("%Y-%m-%d %H:%M") if txn.transaction_time else "-"
        labeled = "*" if txn.is_user_labeled else " "
        logger.info(
            f"{txn.id[:12]} {when} {txn.amount:>14,.0f} "
            f"{labeled}{(txn.category or 'Uncategorized')[:20]:<20} "
            f"{txn.beneficiary_name or ''} {txn.remark or ''}"
        )

    logger.info(f"\nTotal transactions: {len(transactions)} (* = labeled by you)")


def cmd_label(args, services):
    """Set a transaction's category and learn from it."""
    try:
        transaction = services.categorizer.label(
            args.user, args.transaction_id, args.category
        )
    except Exception as e:
        logger.error(f"Error labeling transaction: {e}")
        sys.exit(1)

    logger.info(f"✓ Transaction {transaction.id[:12]} labeled as '{args.category}'")


def cmd_categorize(args, services):
    """Categorize an ad-hoc transaction without storing it."""
    try:
        amount = Decimal(args.amount)
    except InvalidOperation:
        logger.error(f"Invalid amount: {args.amount}")
        sys.exit(1)

    if not amount.is_finite() or amount < 0:
        logger.error(f"Transaction amount must be non-negative: {args.amount}")
        sys.exit(1)

    transaction = Transaction.create_with_checksum(
        raw_data=f"{args.name}|{args.account}|{args.remark}|{args.amount}",
        user_id=args.user,
        amount=amount,
        beneficiary_name=args.name,
        beneficiary_account=args.account,
        remark=args.remark,
    )

    result = services.categorizer.categorize_with_source(args.user, transaction)
    confidence = f", confidence {result.confidence:.2f}" if result.confidence else ""
    logger.info(f"Category: {result.category} (via {result.source}{confidence})")

    suggestions = services.categorizer.suggest(args.user, transaction)
    if suggestions:
        logger.info("\nLearned-pattern suggestions:")
        for suggestion in suggestions:
            matched = ", ".join(suggestion.matched_patterns) or "-"
            logger.info(f"  {suggestion.category:<20} {suggestion.score:>6.2f}  [{matched}]")


def setup_parser(subparsers):
    """Setup transactions subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "transactions",
        help="Import, label and categorize transactions",
        description="Import transaction records, label them and test categorization",
    )

    transactions_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available transaction commands",
        dest="subcommand",
        required=True,
    )

    # Shared by every subcommand so --user can follow the subcommand name
    user_parser = argparse.ArgumentParser(add_help=False)
    user_parser.add_argument("--user", help="User ID (defaults to the configured user)")

    # transactions import
    import_parser = transactions_subparsers.add_parser(
        "import",
        help="Import and categorize transaction records from a JSON file",
        parents=[user_parser],
    )
    import_parser.add_argument("json_file", help="Path to the JSON records file")
    import_parser.set_defaults(func=cmd_import)

    # transactions list
    list_parser = transactions_subparsers.add_parser(
        "list", help="List transactions", parents=[user_parser]
    )
    list_parser.add_argument("--category", help="Only show this category")
    list_parser.add_argument(
        "--limit", type=int, default=50, help="Maximum rows to show (default 50)"
    )
    list_parser.set_defaults(func=cmd_list)

    # transactions label
    label_parser = transactions_subparsers.add_parser(
        "label",
        help="Set a transaction's category and learn from it",
        parents=[user_parser],
    )
    label_parser.add_argument("transaction_id", help="ID of the transaction")
    label_parser.add_argument("category", help="Category name")
    label_parser.set_defaults(func=cmd_label)

    # transactions categorize
    categorize_parser = transactions_subparsers.add_parser(
        "categorize",
        help="Show how a transaction would be categorized",
        parents=[user_parser],
    )
    categorize_parser.add_argument("--name", help="Beneficiary name")
    categorize_parser.add_argument("--account", help="Beneficiary account")
    categorize_parser.add_argument("--remark", help="Transaction remark")
    categorize_parser.add_argument("--amount", required=True, help="Amount")
    categorize_parser.set_defaults(func=cmd_categorize)
