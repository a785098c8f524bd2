"""
LLM Providers - Concrete implementations of the LLM interface.
"""

from llm_web_extract.llm.openai_provider import OpenAIProvider

__all__ = [
    "OpenAIProvider",
]
