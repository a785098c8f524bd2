"""
Vision Interface - Annotated screenshots for vision-capable models.
"""

from abc import ABC, abstractmethod
from typing import Any

from llm_web_extract.interfaces.dom import SelectorMap


class IVisionAnnotator(ABC):
    """Produce a screenshot with element ids drawn over their elements."""

    @abstractmethod
    async def annotate(self, page: Any, selector_map: SelectorMap, full_page: bool) -> bytes:
        """
        Capture an annotated screenshot.
        
        Args:
            page: Browser page
            selector_map: Elements to label, by id
            full_page: Capture the whole scrollable page
            
        Returns:
            PNG image bytes
        """
        ...
