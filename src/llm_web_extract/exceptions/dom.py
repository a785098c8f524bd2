"""
DOM-related exceptions.
"""

from typing import List, Optional

from llm_web_extract.exceptions.base import LLMWebExtractError


class BrowserError(LLMWebExtractError):
    """Base exception for browser-related errors."""
    pass


class DomError(BrowserError):
    """Base exception for DOM serialization and resolution errors."""
    pass


class DomNotSettledError(DomError):
    """
    The DOM did not settle in time.
    
    Raised when the page keeps mutating for longer than the settle bound.
    
    Attributes:
        timeout_ms: The bound that was exceeded
    """
    
    def __init__(self, message: str, timeout_ms: Optional[int] = None):
        super().__init__(message, {"timeout_ms": timeout_ms})
        self.timeout_ms = timeout_ms


class ChunkPartitionChangedError(DomError):
    """
    The chunk partition shifted during a multi-round extraction.
    
    Attributes:
        expected: Chunk indices reported in the first round
        actual: Chunk indices reported in the failing round
    """
    
    def __init__(self, message: str, expected: List[int], actual: List[int]):
        super().__init__(message, {"expected": expected, "actual": actual})
        self.expected = expected
        self.actual = actual


class UnknownElementError(DomError, LookupError):
    """
    An element id returned by the model is not in the selector map.
    
    Attributes:
        element_id: The unresolved element id
    """
    
    def __init__(self, message: str, element_id: str):
        super().__init__(message, {"element_id": element_id})
        self.element_id = element_id
