"""
LLM-related exceptions.
"""

from llm_web_extract.exceptions.base import LLMWebExtractError


class LLMError(LLMWebExtractError):
    """Base exception for LLM-related errors."""
    pass


class InferenceFailure(LLMError):
    """
    An inference call did not produce a usable result.
    
    Covers network, protocol and parse failures from the inference service.
    """
    pass


class LLMConnectionError(InferenceFailure):
    """
    Error connecting to the LLM provider.
    
    Raised when the HTTP request to the LLM API fails.
    
    Attributes:
        status_code: HTTP status code, if a response was received
    """
    
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message, {"status_code": status_code})
        self.status_code = status_code


class InvalidResponseError(InferenceFailure):
    """
    Invalid response from LLM.
    
    Raised when the LLM response cannot be parsed or does not match
    the requested schema.
    """
    
    def __init__(self, message: str, raw_response: str | None = None):
        super().__init__(message, {"raw_response": raw_response[:500] if raw_response else None})
        self.raw_response = raw_response
