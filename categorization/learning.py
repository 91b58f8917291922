"""Learning from user-labeled transactions."""

from models.transaction import Transaction
from categorization.keywords import extract_keywords
from logger import get_logger

logger = get_logger()


def learn(
    categories,
    patterns,
    user_id: str,
    category_name: str,
    transaction: Transaction,
) -> bool:
    """Reinforce a category's patterns with the keywords of a labeled transaction.

    The category is created if the user does not have it yet. Learning is
    best effort: any failure is logged and swallowed so that the label the
    user already applied stays in place.

    Args:
        categories: Category service used to find or create the category.
        patterns: Pattern service the keywords are upserted into.
        user_id: Owner of the category.
        category_name: Category the user assigned to the transaction.
        transaction: The labeled transaction.

    Returns:
        True if all keywords were recorded, False if learning failed.
    """
    try:
        category = categories.find_or_create(user_id, category_name)
        keywords = extract_keywords(transaction)

        for keyword in sorted(keywords):
            patterns.upsert(category.id, keyword)

        logger.debug(
            f"Learned {len(keywords)} keyword(s) for '{category_name}' "
            f"from transaction {transaction.id[:8]}..."
        )
        return True

    except Exception as e:
        logger.error(f"Learning from label '{category_name}' failed: {e}")
        return False
