"""
LLM Web Extract - Structured data and actionable elements from live web pages.

The page DOM is serialized in chunks and read by a language model, either
to fill a caller-supplied Pydantic schema or to find elements to act on.

Example:
    >>> from llm_web_extract import PageSession
    >>> async with PageSession(page) as session:
    ...     article = await session.extract("the headline and author", Article)
    ...     links = await session.observe("links to related articles")
"""

__version__ = "0.1.0"

from llm_web_extract.core.session import PageSession
from llm_web_extract.config.settings import Settings
from llm_web_extract.handlers.extract import ExtractHandler
from llm_web_extract.handlers.merge import accumulating_field
from llm_web_extract.handlers.observe import ObserveHandler
from llm_web_extract.inference.schemas import ObservedElement

__all__ = [
    "PageSession",
    "Settings",
    "ExtractHandler",
    "ObserveHandler",
    "ObservedElement",
    "accumulating_field",
    "__version__",
]
