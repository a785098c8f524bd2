"""
Handlers - The extraction and observation loops.
"""

from llm_web_extract.handlers.capabilities import ModelCapabilities, VISION
from llm_web_extract.handlers.extract import ExtractHandler, ExtractionState
from llm_web_extract.handlers.merge import (
    ACCUMULATE,
    OVERWRITE,
    accumulating_field,
    merge_partial,
)
from llm_web_extract.handlers.observe import ObserveHandler
from llm_web_extract.handlers.store import Observation, ObservationStore

__all__ = [
    "ModelCapabilities",
    "VISION",
    "ExtractHandler",
    "ExtractionState",
    "ACCUMULATE",
    "OVERWRITE",
    "accumulating_field",
    "merge_partial",
    "ObserveHandler",
    "Observation",
    "ObservationStore",
]
