"""
Inference - Prompting and response parsing for extract/observe.
"""

from llm_web_extract.inference.prompts import (
    DEFAULT_OBSERVE_INSTRUCTION,
    VISION_PLACEHOLDER,
    PromptBuilder,
)
from llm_web_extract.inference.schemas import (
    ExtractionMetadata,
    ObservedElement,
    ObserveElementResult,
    ObserveResponse,
    partial_extraction_model,
    parse_json_text,
)
from llm_web_extract.inference.service import LLMInferenceService

__all__ = [
    "DEFAULT_OBSERVE_INSTRUCTION",
    "VISION_PLACEHOLDER",
    "PromptBuilder",
    "ExtractionMetadata",
    "ObservedElement",
    "ObserveElementResult",
    "ObserveResponse",
    "partial_extraction_model",
    "parse_json_text",
    "LLMInferenceService",
]
