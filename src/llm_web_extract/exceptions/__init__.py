"""
Exceptions module - Custom exception hierarchy.

This module defines all custom exceptions used throughout LLM Web Extract,
providing clear error types for different failure scenarios.
"""

from llm_web_extract.exceptions.base import (
    LLMWebExtractError,
    ConfigurationError,
)
from llm_web_extract.exceptions.dom import (
    BrowserError,
    DomError,
    DomNotSettledError,
    ChunkPartitionChangedError,
    UnknownElementError,
)
from llm_web_extract.exceptions.llm import (
    LLMError,
    InferenceFailure,
    LLMConnectionError,
    InvalidResponseError,
)

__all__ = [
    # Base exceptions
    "LLMWebExtractError",
    "ConfigurationError",
    # DOM exceptions
    "BrowserError",
    "DomError",
    "DomNotSettledError",
    "ChunkPartitionChangedError",
    "UnknownElementError",
    # LLM exceptions
    "LLMError",
    "InferenceFailure",
    "LLMConnectionError",
    "InvalidResponseError",
]
