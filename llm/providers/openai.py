"""OpenAI provider implementation using structured outputs.

Works against any OpenAI-compatible endpoint (e.g. Groq) through ``base_url``.
"""

from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel
from openai import OpenAI
from llm.providers.base import LLMProvider
from llm.prompts.loader import PromptManager
from logger import get_logger

logger = get_logger()


# Pydantic model for structured output
class CategoryChoice(BaseModel):
    """The category the model picked for a transaction."""

    category: str
    reasoning: Optional[str] = None


class OpenAIProvider(LLMProvider):
    """OpenAI implementation using structured outputs for reliable parsing."""

    def __init__(
        self,
        api_key: str,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: float = 20.0,
        client: Optional[OpenAI] = None,
        prompt_manager: Optional[PromptManager] = None,
    ):
        """Initialize OpenAI provider.

        Args:
            api_key: API key for the endpoint.
            model: Model to use (e.g., "gpt-4o-mini"). If None, uses prompt default.
            base_url: Optional OpenAI-compatible endpoint URL.
            timeout: Request timeout in seconds.
            client: Preconfigured client, mainly for testing.
            prompt_manager: Prompt manager, mainly for testing.
        """
        self.client = client or OpenAI(
            api_key=api_key, base_url=base_url, timeout=timeout, max_retries=1
        )
        self.model = model
        self.prompt_manager = prompt_manager or PromptManager()

    def classify_transaction(
        self,
        categories: List[str],
        beneficiary_name: Optional[str],
        remark: Optional[str],
        amount: Decimal,
    ) -> str:
        """Classify a transaction using OpenAI with structured outputs.

        Args:
            categories: Category names the model may choose from.
            beneficiary_name: Beneficiary name of the transaction, if any.
            remark: Transaction remark, if any.
            amount: Transaction amount.

        Returns:
            The category text chosen by the model (empty if it gave none).

        Raises:
            Exception: If the OpenAI API call fails.
        """
        rendered_prompt = self.prompt_manager.render_prompt(
            "categorization",
            {
                "categories": "\n".join(f"- {name}" for name in categories),
                "beneficiary_name": beneficiary_name or "Unknown",
                "remark": remark or "None",
                "amount": f"{amount:,.0f}",
            },
        )

        # Determine model to use
        model = self.model or rendered_prompt["parameters"].get("model", "gpt-4o-mini")
        temperature = rendered_prompt["parameters"].get("temperature", 0.3)
        max_tokens = rendered_prompt["parameters"].get("max_tokens", 200)

        logger.debug(
            f"Using model: {model}, prompt version: {rendered_prompt['version']}"
        )

        try:
            response = self.client.chat.completions.parse(
                model=model,
                messages=[
                    {"role": "system", "content": rendered_prompt["system_prompt"]},
                    {"role": "user", "content": rendered_prompt["user_prompt"]},
                ],
                temperature=temperature,
                max_tokens=max_tokens,
                response_format=CategoryChoice,
            )
        except Exception as e:
            logger.error(f"OpenAI API error: {e}")
            raise

        message = response.choices[0].message
        if message.parsed is not None:
            if message.parsed.reasoning:
                logger.debug(f"Model reasoning: {message.parsed.reasoning}")
            return message.parsed.category.strip()

        # Some compatible endpoints ignore the schema and answer in plain text
        logger.warning("OpenAI returned null parsed response, using raw content")
        return (message.content or "").strip()
