"""Remote LLM classifier used as the last categorization fallback."""

from decimal import Decimal
from typing import List, Optional
from llm.providers.base import LLMProvider
from categorization.rules import EXPENSE_CATEGORIES, TRANSFER
from logger import get_logger

logger = get_logger()


class RemoteClassifier:
    """Adapter around an LLM provider that always yields a known category.

    Args:
        provider: LLM provider to delegate to, or None when LLM use is disabled.
        categories: Category vocabulary offered to the model.
    """

    def __init__(
        self,
        provider: Optional[LLMProvider],
        categories: Optional[List[str]] = None,
    ):
        self.provider = provider
        self.categories = list(categories or EXPENSE_CATEGORIES)

    def classify(
        self,
        beneficiary_name: Optional[str],
        remark: Optional[str],
        amount: Decimal,
    ) -> str:
        """Ask the remote model for a category.

        Never raises: a disabled provider, a transport error or a reply
        naming no known category all map to the generic transfer category.

        Args:
            beneficiary_name: Beneficiary name of the transaction, if any.
            remark: Transaction remark, if any.
            amount: Transaction amount.

        Returns:
            One of the vocabulary's category names.
        """
        if self.provider is None:
            logger.info("Remote classifier disabled - defaulting to transfer")
            return TRANSFER

        try:
            reply = self.provider.classify_transaction(
                self.categories, beneficiary_name, remark, amount
            )
        except Exception as e:
            logger.error(f"Remote classification failed: {e}")
            return TRANSFER

        category = self.match_category(reply)
        if category is None:
            logger.warning(f"Remote classifier returned unknown category: {reply!r}")
            return TRANSFER

        return category

    def match_category(self, reply: Optional[str]) -> Optional[str]:
        """Find the vocabulary category named in a free-text reply.

        An exact (case-insensitive) answer wins; otherwise the first
        category, in vocabulary order, contained in the reply is used.
        """
        if not reply:
            return None

        text = reply.strip().lower()
        for category in self.categories:
            if text == category.lower():
                return category

        for category in self.categories:
            if category.lower() in text:
                return category

        return None
