"""
Interfaces module - Abstract base classes for the pluggable collaborators.
"""

from llm_web_extract.interfaces.llm import (
    ILLMProvider,
    Message,
    MessageRole,
    ImageContent,
    LLMResponse,
    Usage,
)
from llm_web_extract.interfaces.dom import (
    IDomChunkProvider,
    IDomSettleWaiter,
    DomChunk,
    DomSnapshot,
    SelectorMap,
)
from llm_web_extract.interfaces.inference import IInferenceService
from llm_web_extract.interfaces.vision import IVisionAnnotator

__all__ = [
    # LLM
    "ILLMProvider",
    "Message",
    "MessageRole",
    "ImageContent",
    "LLMResponse",
    "Usage",
    # DOM
    "IDomChunkProvider",
    "IDomSettleWaiter",
    "DomChunk",
    "DomSnapshot",
    "SelectorMap",
    # Inference / vision
    "IInferenceService",
    "IVisionAnnotator",
]
