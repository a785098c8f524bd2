"""
DOM Interfaces - Contracts for DOM serialization and settle detection.

A chunk provider turns the live page into LLM-readable text. Extraction
consumes it one chunk at a time; observation takes a single snapshot
together with the element-id to locator map.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

# Element id -> candidate locators, preferred first
SelectorMap = Dict[str, List[str]]


@dataclass
class DomChunk:
    """
    One serialized chunk of the page.
    
    Attributes:
        output_string: Serialized DOM text of this chunk
        chunk: Index of the chunk that was produced
        chunks: All chunk indices known to the provider
    """
    output_string: str
    chunk: int
    chunks: List[int]


@dataclass
class DomSnapshot:
    """
    A serialized view of the page plus its selector map.
    
    Attributes:
        output_string: Serialized DOM text
        selector_map: Element id to candidate locators
    """
    output_string: str
    selector_map: SelectorMap = field(default_factory=dict)


class IDomChunkProvider(ABC):
    """Serialize the current DOM into chunks and selector maps."""

    @abstractmethod
    async def next_chunk(self, chunks_seen: Sequence[int]) -> DomChunk:
        """
        Serialize the first chunk not in chunks_seen.
        
        Args:
            chunks_seen: Chunk indices already consumed in this call
        """
        ...

    @abstractmethod
    async def snapshot(self, full_page: bool) -> DomSnapshot:
        """
        Serialize the page for observation.
        
        Args:
            full_page: Serialize every chunk instead of the first one
        """
        ...

    async def start_debug(self) -> None:
        """Begin visual debugging of processed elements. Optional."""
        return None

    async def cleanup_debug(self) -> None:
        """Remove visual debugging artifacts. Optional."""
        return None


class IDomSettleWaiter(ABC):
    """Wait for the DOM to stop changing."""

    @abstractmethod
    async def wait(self, timeout_ms: Optional[int] = None) -> None:
        """
        Block until the DOM is settled.
        
        Raises:
            DomNotSettledError: If the bound is exceeded
        """
        ...
