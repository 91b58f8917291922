"""LLM integration module for remote transaction classification."""

from llm.factory import get_llm_provider, try_get_llm_provider

__all__ = ["get_llm_provider", "try_get_llm_provider"]
