"""LLM integration module for parsing spending statements."""

from llm.factory import get_llm_provider

__all__ = ["get_llm_provider"]
