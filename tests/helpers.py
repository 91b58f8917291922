"""Helper utilities for tests."""

from llm.providers.base import LLMProvider


class StubLLMProvider(LLMProvider):
    """Deterministic LLM provider that records its calls.

    Args:
        reply: Text returned by every call.
        error: Exception raised by every call instead of replying.
    """

    def __init__(self, reply="Transfer", error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    def classify_transaction(self, categories, beneficiary_name, remark, amount):
        self.calls.append(
            {
                "categories": list(categories),
                "beneficiary_name": beneficiary_name,
                "remark": remark,
                "amount": amount,
            }
        )
        if self.error is not None:
            raise self.error
        return self.reply
