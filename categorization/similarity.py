"""Match scoring between transaction keywords and learned patterns.

A keyword matches a pattern in one of three tiers, the first that applies
wins:

- exact: the full pattern weight
- substring (either way): 70% of the weight
- fuzzy: bigram Jaccard similarity above 0.8 scores ``weight * similarity * 0.5``
"""

from typing import Iterable, Set

EXACT_FACTOR = 1.0
SUBSTRING_FACTOR = 0.7
FUZZY_FACTOR = 0.5
FUZZY_THRESHOLD = 0.8
MIN_FUZZY_LENGTH = 3


def _bigrams(text: str) -> Set[str]:
    return {text[i : i + 2] for i in range(len(text) - 1)}


def bigram_similarity(first: str, second: str) -> float:
    """Jaccard similarity of the two strings' sets of character bigrams.

    Returns 1.0 for identical strings and 0.0 when either string is shorter
    than three characters.
    """
    if first == second:
        return 1.0
    if len(first) < MIN_FUZZY_LENGTH or len(second) < MIN_FUZZY_LENGTH:
        return 0.0

    first_bigrams = _bigrams(first)
    second_bigrams = _bigrams(second)
    union = first_bigrams | second_bigrams
    if not union:
        return 0.0
    return len(first_bigrams & second_bigrams) / len(union)


def score(keyword: str, pattern_keyword: str, pattern_weight: float) -> float:
    """Score one transaction keyword against one stored pattern.

    Args:
        keyword: Normalized keyword extracted from the transaction.
        pattern_keyword: Keyword of the stored pattern.
        pattern_weight: Weight of the stored pattern.

    Returns:
        Match score, 0.0 when the keyword does not match the pattern.
    """
    if not keyword or not pattern_keyword:
        return 0.0

    if keyword == pattern_keyword:
        return pattern_weight * EXACT_FACTOR

    if keyword in pattern_keyword or pattern_keyword in keyword:
        return pattern_weight * SUBSTRING_FACTOR

    similarity = bigram_similarity(keyword, pattern_keyword)
    if similarity > FUZZY_THRESHOLD:
        return pattern_weight * similarity * FUZZY_FACTOR

    return 0.0


def match_score(
    keywords: Iterable[str], pattern_keyword: str, pattern_weight: float
) -> float:
    """Best score of any transaction keyword against a pattern.

    One strongly matching keyword is enough; scores are not summed.
    """
    return max(
        (score(keyword, pattern_keyword, pattern_weight) for keyword in keywords),
        default=0.0,
    )
