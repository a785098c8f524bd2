"""
DOM - Playwright-backed serialization, chunking and settle detection.
"""

from llm_web_extract.dom.chunker import PlaywrightDomChunkProvider
from llm_web_extract.dom.settle import DomSettleWaiter

__all__ = [
    "PlaywrightDomChunkProvider",
    "DomSettleWaiter",
]
