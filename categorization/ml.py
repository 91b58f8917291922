"""Learned-pattern categorizer.

Ranks a user's categories by how well their learned patterns match a
transaction. Scores are unnormalized sums of weighted keyword matches, not
probabilities: a category is predicted only when its raw score is above
MIN_SCORE, and the reported confidence is its share of all categories'
scores (at least 1.0 in the denominator).
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Set
from models.category import Category
from models.transaction import Transaction
from categorization.keywords import extract_keywords
from categorization.rules import OTHER
from categorization.similarity import match_score

MIN_SCORE = 0.5


@dataclass
class CategoryScore:
    """Total match score of one category for a transaction."""

    category: str
    score: float
    matched_patterns: List[str] = field(default_factory=list)


@dataclass
class Prediction:
    """Result of the learned-pattern categorizer.

    Attributes:
        category: Predicted category name, "Other" when nothing matched well.
        confidence: Share of the winning category in all scores, in [0, 1].
        is_prediction: Whether the learned patterns produced the answer.
        matched_patterns: Pattern keywords of the winning category that matched.
    """

    category: str
    confidence: float
    is_prediction: bool
    matched_patterns: List[str] = field(default_factory=list)

    @classmethod
    def no_match(cls) -> "Prediction":
        return cls(category=OTHER, confidence=0.0, is_prediction=False)


def score_category(keywords: Set[str], category: Category) -> CategoryScore:
    """Sum the match scores of all of a category's patterns."""
    total = 0.0
    matched = []
    for pattern in category.patterns:
        pattern_score = match_score(keywords, pattern.keyword, pattern.weight)
        if pattern_score > 0:
            total += pattern_score
            matched.append(pattern.keyword)
    return CategoryScore(category=category.name, score=total, matched_patterns=matched)


def rank_categories(
    transaction: Transaction, categories: Iterable[Category]
) -> List[CategoryScore]:
    """Score every category that has learned patterns, best first."""
    keywords = extract_keywords(transaction)
    scores = [
        score_category(keywords, category)
        for category in categories
        if category.patterns
    ]
    # Stable sort keeps the store's category order among ties
    scores.sort(key=lambda s: s.score, reverse=True)
    return scores


def predict(transaction: Transaction, categories: List[Category]) -> Prediction:
    """Predict a transaction's category from the user's learned patterns.

    Args:
        transaction: Transaction to categorize.
        categories: All of the user's categories with patterns loaded.

    Returns:
        Prediction; ``is_prediction`` is False on cold start (no patterns at
        all) or when the best category scores MIN_SCORE or less.
    """
    if not any(category.patterns for category in categories):
        return Prediction.no_match()

    scores = rank_categories(transaction, categories)
    if not scores or scores[0].score <= MIN_SCORE:
        return Prediction.no_match()

    best = scores[0]
    total = sum(s.score for s in scores)
    confidence = min(best.score / max(total, 1.0), 1.0)

    return Prediction(
        category=best.category,
        confidence=confidence,
        is_prediction=True,
        matched_patterns=best.matched_patterns,
    )


def suggest(
    transaction: Transaction, categories: List[Category], limit: int = 3
) -> List[CategoryScore]:
    """Top categories for a transaction, including ones that scored zero.

    Used to offer choices when the user labels a transaction by hand.
    """
    keywords = extract_keywords(transaction)
    scores = [score_category(keywords, category) for category in categories]
    scores.sort(key=lambda s: s.score, reverse=True)
    return scores[:limit]
