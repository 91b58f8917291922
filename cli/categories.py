#!/usr/bin/env python3

import sys
import argparse
from logger import get_logger

logger = get_logger()


def cmd_list(args, services):
    """List the user's categories with their pattern counts."""
    categories = services.categories.find_all(args.user)

    if not categories:
        logger.info(f"No categories found for user '{args.user}'.")
        logger.info("Use 'python -m cli categories seed' to create the default set.")
        return

    logger.info(f"\nCategories of '{args.user}':")
    logger.info("=" * 80)
    for category in categories:
        pattern_count = services.patterns.count(category.id)
        default_marker = " (default)" if category.is_default else ""
        logger.info(
            f"{category.icon} {category.name}{default_marker} "
            f"[ID: {category.id}, patterns: {pattern_count}]"
        )

    logger.info(f"\nTotal categories: {len(categories)}")


def cmd_seed(args, services):
    """Create the default category set for a user without categories."""
    existing = services.categories.find_all(args.user)
    if existing:
        logger.info(
            f"⊘ User '{args.user}' already has {len(existing)} categories, skipping."
        )
        return

    created = services.categories.ensure_defaults(args.user)
    for category in created:
        logger.info(f"✓ Created '{category.name}' (ID: {category.id})")
    logger.info(f"\nSeeded {len(created)} categories for '{args.user}'.")


def cmd_patterns(args, services):
    """Show learned patterns, strongest first."""
    category_id = None
    if args.category:
        category = services.categories.find_by_name(args.user, args.category)
        if not category:
            logger.error(f"Category '{args.category}' not found.")
            sys.exit(1)
        category_id = category.id

    patterns = services.patterns.list(args.user, category_id)
    if not patterns:
        logger.info("No learned patterns yet. Label some transactions first.")
        return

    names = {c.id: c.name for c in services.categories.find_all(args.user)}

    logger.info(f"\n{'Keyword':<40} {'Category':<20} {'Weight':>7} {'Seen':>5}")
    logger.info("-" * 80)
    for pattern in patterns[: args.limit]:
        logger.info(
            f"{pattern.keyword[:40]:<40} {names.get(pattern.category_id, '?')[:20]:<20} "
            f"{pattern.weight:>7.1f} {pattern.occurrences:>5}"
        )

    if len(patterns) > args.limit:
        logger.info(f"... and {len(patterns) - args.limit} more")


def cmd_delete(args, services):
    """Delete a category and its learned patterns."""
    category = services.categories.find_by_name(args.user, args.name)
    if not category:
        logger.error(f"Category '{args.name}' not found.")
        sys.exit(1)

    confirm = (
        input(
            f"\nDelete '{category.name}' and its "
            f"{services.patterns.count(category.id)} learned patterns? (yes/no): "
        )
        .strip()
        .lower()
    )
    if confirm != "yes":
        logger.info("Deletion cancelled.")
        return

    try:
        if services.categories.delete(category.id):
            logger.info(f"✓ Category '{category.name}' deleted successfully.")
        else:
            logger.error("Failed to delete category.")
            sys.exit(1)
    except Exception as e:
        logger.error(f"Error deleting category: {e}")
        sys.exit(1)


def setup_parser(subparsers):
    """Setup categories subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "categories",
        help="Manage categories",
        description="List, seed and delete categories; inspect learned patterns",
    )

    categories_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available category commands",
        dest="subcommand",
        required=True,
    )

    # Shared by every subcommand so --user can follow the subcommand name
    user_parser = argparse.ArgumentParser(add_help=False)
    user_parser.add_argument("--user", help="User ID (defaults to the configured user)")

    list_parser = categories_subparsers.add_parser(
        "list", help="List categories", parents=[user_parser]
    )
    list_parser.set_defaults(func=cmd_list)

    seed_parser = categories_subparsers.add_parser(
        "seed", help="Create the default category set", parents=[user_parser]
    )
    seed_parser.set_defaults(func=cmd_seed)

    patterns_parser = categories_subparsers.add_parser(
        "patterns", help="Show learned patterns", parents=[user_parser]
    )
    patterns_parser.add_argument("--category", help="Only show this category")
    patterns_parser.add_argument(
        "--limit", type=int, default=50, help="Maximum rows to show (default 50)"
    )
    patterns_parser.set_defaults(func=cmd_patterns)

    delete_parser = categories_subparsers.add_parser(
        "delete", help="Delete a category by name", parents=[user_parser]
    )
    delete_parser.add_argument("name", help="Name of the category to delete")
    delete_parser.set_defaults(func=cmd_delete)
