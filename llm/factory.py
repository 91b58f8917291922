"""Factory for creating LLM provider instances."""

from typing import Optional
from config import Config
from llm.providers.base import LLMProvider
from llm.providers.openai import OpenAIProvider
from logger import get_logger

logger = get_logger()


def get_llm_provider(config: Config) -> Optional[LLMProvider]:
    """Create an LLM provider instance based on configuration.

    Args:
        config: Application configuration.

    Returns:
        LLMProvider instance, or None if LLM is disabled.

    Raises:
        ValueError: If provider is configured but settings are invalid.
    """
    if not config.llm_enabled:
        logger.info("LLM categorization is disabled")
        return None

    provider_name = config.llm_provider

    if provider_name == "openai":
        if not config.llm_openai_api_key:
            raise ValueError("OpenAI provider selected but llm api_key not configured")

        logger.info(
            f"Initializing OpenAI provider (model: {config.llm_openai_model or 'default'}, "
            f"endpoint: {config.llm_base_url or 'default'})"
        )

        return OpenAIProvider(
            api_key=config.llm_openai_api_key,
            model=config.llm_openai_model,
            base_url=config.llm_base_url,
            timeout=config.llm_timeout,
        )

    elif provider_name is None:
        logger.info("No LLM provider configured")
        return None

    else:
        raise ValueError(f"Unknown LLM provider: {provider_name}")


def try_get_llm_provider(config: Config) -> Optional[LLMProvider]:
    """Like get_llm_provider, but logs configuration errors and returns None.

    Categorization must keep working with a misconfigured LLM; the remote
    fallback then degrades to its default category.
    """
    try:
        return get_llm_provider(config)
    except Exception as e:
        logger.error(f"Failed to initialize LLM provider: {e}")
        return None
