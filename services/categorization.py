"""Categorization service: the fallback chain and learning entry points."""

from dataclasses import dataclass
from typing import List, Optional
from models.transaction import Transaction
from categorization import learning, ml
from categorization.ml import CategoryScore, Prediction
from categorization.remote import RemoteClassifier
from categorization.rules import classify_by_rule, OTHER
from logger import get_logger

logger = get_logger()

# Minimum confidence for a learned prediction to be accepted
MIN_CONFIDENCE = 0.5

SOURCE_ML = "ml"
SOURCE_RULES = "rules"
SOURCE_REMOTE = "remote"


@dataclass
class CategorizationResult:
    """A category decision and the tier of the fallback chain that made it."""

    category: str
    source: str
    confidence: Optional[float] = None


class CategorizationService:
    """Assigns categories to transactions and learns from user labels.

    Args:
        categories: Category service (the user's category directory).
        patterns: Pattern service (the learned pattern store).
        transactions: Transaction service, used when labeling stored transactions.
        remote_classifier: Last-resort classifier. It never raises.
    """

    def __init__(
        self,
        categories,
        patterns,
        transactions,
        remote_classifier: RemoteClassifier,
    ):
        self.categories = categories
        self.patterns = patterns
        self.transactions = transactions
        self.remote_classifier = remote_classifier

    def classify(self, user_id: str, transaction: Transaction) -> Prediction:
        """Predict a category from the user's learned patterns only.

        Args:
            user_id: Owner of the patterns.
            transaction: Transaction to classify.

        Returns:
            Prediction with ``is_prediction`` False on cold start, weak
            evidence or when the patterns cannot be read.
        """
        try:
            categories = self.categories.find_all_with_patterns(user_id)
            return ml.predict(transaction, categories)
        except Exception as e:
            logger.error(f"Reading learned patterns of '{user_id}' failed: {e}")
            return Prediction.no_match()

    def suggest(
        self, user_id: str, transaction: Transaction, limit: int = 3
    ) -> List[CategoryScore]:
        """Rank the user's categories for a transaction, best first.

        Args:
            user_id: Owner of the categories.
            transaction: Transaction to rank categories for.
            limit: Maximum number of suggestions.

        Returns:
            Up to ``limit`` CategoryScore objects.
        """
        categories = self.categories.find_all_with_patterns(user_id)
        return ml.suggest(transaction, categories, limit)

    def categorize_with_source(
        self, user_id: str, transaction: Transaction
    ) -> CategorizationResult:
        """Run the fallback chain and report which tier decided.

        1. learned patterns, if predicted with confidence above MIN_CONFIDENCE
        2. static keyword rules, unless they only give "Other"
        3. remote classifier

        Args:
            user_id: Owner of the learned patterns.
            transaction: Newly observed transaction.

        Returns:
            CategorizationResult with the chosen category and its source.
        """
        prediction = self.classify(user_id, transaction)
        if prediction.is_prediction and prediction.confidence > MIN_CONFIDENCE:
            logger.debug(
                f"Transaction {transaction.id[:8]}... categorized by learned patterns "
                f"as '{prediction.category}' (confidence {prediction.confidence:.2f}, "
                f"matched {prediction.matched_patterns})"
            )
            return CategorizationResult(
                category=prediction.category,
                source=SOURCE_ML,
                confidence=prediction.confidence,
            )

        rule_category = classify_by_rule(
            transaction.beneficiary_name, transaction.remark
        )
        if rule_category != OTHER:
            logger.debug(
                f"Transaction {transaction.id[:8]}... categorized by rules as '{rule_category}'"
            )
            return CategorizationResult(category=rule_category, source=SOURCE_RULES)

        remote_category = self.remote_classifier.classify(
            transaction.beneficiary_name, transaction.remark, transaction.amount
        )
        logger.info(
            f"Transaction {transaction.id[:8]}... categorized remotely as '{remote_category}'"
        )
        return CategorizationResult(category=remote_category, source=SOURCE_REMOTE)

    def categorize(self, user_id: str, transaction: Transaction) -> str:
        """Pick the category for a newly observed transaction.

        Args:
            user_id: Owner of the learned patterns.
            transaction: Newly observed transaction.

        Returns:
            Category name. Never raises for lack of evidence or remote failures.
        """
        return self.categorize_with_source(user_id, transaction).category

    def learn(
        self, user_id: str, category_name: str, transaction: Transaction
    ) -> bool:
        """Learn from a category the user assigned to a transaction.

        Best effort: failures are logged and reported as False, never raised.
        """
        return learning.learn(
            self.categories, self.patterns, user_id, category_name, transaction
        )

    def label(
        self, user_id: str, transaction_id: str, category_name: str
    ) -> Transaction:
        """Apply a user's category to a stored transaction and learn from it.

        The category update is committed before learning starts, so a
        learning failure never undoes it.

        Args:
            user_id: The user labeling the transaction.
            transaction_id: ID of the stored transaction.
            category_name: Category chosen by the user.

        Returns:
            The updated Transaction.

        Raises:
            Exception: If the transaction does not exist or belongs to another user.
        """
        transaction = self.transactions.find(transaction_id)
        if transaction is None or transaction.user_id != user_id:
            raise Exception(f"Transaction with ID {transaction_id} not found")

        self.transactions.set_category(transaction_id, category_name)
        transaction.category = category_name
        transaction.is_user_labeled = True

        self.learn(user_id, category_name, transaction)
        return transaction
