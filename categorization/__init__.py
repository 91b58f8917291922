"""Adaptive transaction categorization.

Categories are resolved through a fixed fallback chain: patterns learned from
the user's own labels, then static keyword rules, then a remote LLM
classifier. The orchestration lives in services.categorization.
"""

from categorization.keywords import extract_keywords, amount_bucket
from categorization.similarity import score, match_score, bigram_similarity
from categorization.rules import classify_by_rule, EXPENSE_CATEGORIES, OTHER, TRANSFER
from categorization.ml import predict, suggest, Prediction, CategoryScore
from categorization.learning import learn
from categorization.remote import RemoteClassifier

__all__ = [
    "extract_keywords",
    "amount_bucket",
    "score",
    "match_score",
    "bigram_similarity",
    "classify_by_rule",
    "EXPENSE_CATEGORIES",
    "OTHER",
    "TRANSFER",
    "predict",
    "suggest",
    "Prediction",
    "CategoryScore",
    "learn",
    "RemoteClassifier",
]
