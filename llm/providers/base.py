"""Base provider interface for LLM implementations."""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import List, Optional


class LLMProvider(ABC):
    """Abstract base class for LLM providers.

    Each provider can implement classification in its own optimal way,
    using provider-specific features like structured outputs.
    """

    @abstractmethod
    def classify_transaction(
        self,
        categories: List[str],
        beneficiary_name: Optional[str],
        remark: Optional[str],
        amount: Decimal,
    ) -> str:
        """Pick a category for a single transaction.

        Args:
            categories: Category names the model may choose from.
            beneficiary_name: Beneficiary name of the transaction, if any.
            remark: Transaction remark, if any.
            amount: Transaction amount.

        Returns:
            The model's free-text answer. It is expected, but not guaranteed,
            to be one of the category names.

        Raises:
            Exception: If the LLM API call fails.
        """
        pass
