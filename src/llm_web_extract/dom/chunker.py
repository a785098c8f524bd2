"""
Playwright DOM chunk provider.

Serializes the live page in the browser and hands back LLM-readable text
plus the element-id to XPath map.
"""

import logging
from typing import TYPE_CHECKING, Any, Dict, Sequence

from llm_web_extract.dom.scripts import (
    CLEANUP_DEBUG_JS,
    DEBUG_CLASS,
    DEBUG_STYLE_ID,
    PROCESS_DOM_JS,
    START_DEBUG_JS,
)
from llm_web_extract.exceptions import DomError
from llm_web_extract.interfaces.dom import DomChunk, DomSnapshot, IDomChunkProvider

if TYPE_CHECKING:
    from playwright.async_api import Page

logger = logging.getLogger(__name__)


class PlaywrightDomChunkProvider(IDomChunkProvider):
    """
    Chunk provider backed by a Playwright page.
    
    Each chunk is one viewport-height band of the document.
    
    Example:
        >>> provider = PlaywrightDomChunkProvider(page)
        >>> first = await provider.next_chunk([])
        >>> first.chunk, first.chunks
        (0, [0, 1, 2])
    """
    
    def __init__(self, page: "Page", debug_dom: bool = False):
        """
        Args:
            page: Playwright page to serialize
            debug_dom: Outline processed elements while a handler runs
        """
        self._page = page
        self._debug_dom = debug_dom
    
    async def _process(self, chunks_seen: Sequence[int], full_page: bool) -> Dict[str, Any]:
        return await self._page.evaluate(
            PROCESS_DOM_JS,
            {
                "chunksSeen": list(chunks_seen),
                "fullPage": full_page,
                "debugClass": DEBUG_CLASS,
                "debugStyleId": DEBUG_STYLE_ID,
            },
        )
    
    async def next_chunk(self, chunks_seen: Sequence[int]) -> DomChunk:
        result = await self._process(chunks_seen, full_page=False)
        if result["chunk"] < 0:
            raise DomError(
                "No unseen chunk left to process",
                {"chunks_seen": list(chunks_seen), "chunks": result["chunks"]},
            )
        logger.debug(f"Serialized chunk {result['chunk']} of {len(result['chunks'])}")
        return DomChunk(
            output_string=result["outputString"],
            chunk=result["chunk"],
            chunks=list(result["chunks"]),
        )
    
    async def snapshot(self, full_page: bool) -> DomSnapshot:
        result = await self._process([], full_page=full_page)
        return DomSnapshot(
            output_string=result["outputString"],
            selector_map={str(k): list(v) for k, v in result["selectorMap"].items()},
        )
    
    async def start_debug(self) -> None:
        if not self._debug_dom:
            return
        await self._page.evaluate(
            START_DEBUG_JS, {"styleId": DEBUG_STYLE_ID, "debugClass": DEBUG_CLASS}
        )
    
    async def cleanup_debug(self) -> None:
        if not self._debug_dom:
            return
        await self._page.evaluate(
            CLEANUP_DEBUG_JS, {"styleId": DEBUG_STYLE_ID, "debugClass": DEBUG_CLASS}
        )
