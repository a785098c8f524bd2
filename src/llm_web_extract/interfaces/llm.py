"""
LLM Provider Interface - Abstract base class for chat-completion backends.

Example:
    >>> from llm_web_extract.llm import OpenAIProvider
    >>> provider = OpenAIProvider(base_url="https://api.openai.com", model="gpt-4o")
    >>> response = await provider.complete([Message.user("Hello")])
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional


class MessageRole(Enum):
    """Role of a message in the conversation."""
    SYSTEM = "system"
    USER = "user"


@dataclass
class ImageContent:
    """
    An image attached to a user message.
    
    Attributes:
        data: Base64 payload
        media_type: MIME type used for the data URL
    """
    data: str
    media_type: str = "image/png"
    
    def to_url(self) -> str:
        """Return the data URL used in an image_url content part."""
        return f"data:{self.media_type};base64,{self.data}"


@dataclass
class Message:
    """
    One chat message. Inference calls send a system prompt followed by
    a single user turn, which may carry the annotated screenshot.
    """
    role: MessageRole
    content: str
    images: Optional[List[ImageContent]] = None

    @classmethod
    def system(cls, content: str) -> "Message":
        """Create a system message."""
        return cls(role=MessageRole.SYSTEM, content=content)

    @classmethod
    def user(cls, content: str, images: Optional[List[ImageContent]] = None) -> "Message":
        """Create a user message."""
        return cls(role=MessageRole.USER, content=content, images=images)


@dataclass
class Usage:
    """Token usage information from an LLM response."""
    prompt_tokens: int
    completion_tokens: int
    total_tokens: int


@dataclass
class LLMResponse:
    """
    Completion returned by a provider.
    
    Attributes:
        content: Assistant text, expected to hold a JSON object
        model: Model id reported by the backend
        usage: Token counts for the call
        finish_reason: Why generation stopped ('stop', 'length')
        raw_response: Decoded response body
    """
    content: str
    model: str
    usage: Usage
    finish_reason: str = "stop"
    raw_response: Any = None


class ILLMProvider(ABC):
    """
    Chat-completion backend used by the inference service.
    
    Implementations handle authentication, request formatting and
    response parsing for their specific backend.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name (e.g., 'openai')."""
        ...

    @property
    @abstractmethod
    def default_model(self) -> str:
        """Model used when a call does not name one."""
        ...

    @abstractmethod
    async def complete(
        self,
        messages: List[Message],
        model: Optional[str] = None,
        temperature: float = 0.1,
        max_tokens: Optional[int] = None,
        **kwargs: Any,
    ) -> LLMResponse:
        """
        Run one chat completion.
        
        Raises:
            LLMConnectionError: If the request fails
        """
        ...

    async def close(self) -> None:
        """Release network resources. Default is a no-op."""
        return None
