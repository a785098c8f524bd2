"""
Core module - Session entry point.
"""

from llm_web_extract.core.session import PageSession

__all__ = [
    "PageSession",
]
