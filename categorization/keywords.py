"""Keyword extraction from transaction records."""

from decimal import Decimal
from typing import Optional, Set, Union
from models.transaction import Transaction

# Upper bounds (exclusive) of the amount buckets, in whole currency units
AMOUNT_BUCKETS = [
    (10_000, "under_10k"),
    (50_000, "10k_50k"),
    (100_000, "50k_100k"),
    (500_000, "100k_500k"),
    (1_000_000, "500k_1m"),
]
TOP_AMOUNT_BUCKET = "over_1m"

# Tokens of this length or shorter are too generic to learn from
MIN_TOKEN_LENGTH = 3


def amount_bucket(amount: Union[Decimal, int, float]) -> str:
    """Map an amount onto its discrete range token, e.g. 45000 -> "10k_50k"."""
    for upper, token in AMOUNT_BUCKETS:
        if amount < upper:
            return token
    return TOP_AMOUNT_BUCKET


def _text_keywords(text: Optional[str]) -> Set[str]:
    """The whole normalized text plus each of its longer words."""
    if not text:
        return set()

    normalized = text.lower().strip()
    keywords = {normalized}
    keywords.update(word for word in normalized.split() if len(word) >= MIN_TOKEN_LENGTH)
    return keywords


def extract_keywords(transaction: Transaction) -> Set[str]:
    """Extract the normalized keyword set used for learning and matching.

    The set always contains the amount bucket token, so it is never empty.

    Args:
        transaction: Transaction to extract keywords from.

    Returns:
        Set of keywords: beneficiary name and remark (lowercased, whole and
        split into words), the beneficiary account verbatim and the amount
        bucket.
    """
    keywords = _text_keywords(transaction.beneficiary_name)
    keywords |= _text_keywords(transaction.remark)

    # Account numbers are identifiers, kept as-is
    if transaction.beneficiary_account:
        keywords.add(transaction.beneficiary_account)

    keywords.add(amount_bucket(transaction.amount))
    keywords.discard("")
    return keywords
