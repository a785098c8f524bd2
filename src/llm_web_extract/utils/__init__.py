"""
Utility modules.
"""

from llm_web_extract.utils.logging import (
    EventLogger,
    LogLine,
    auxiliary,
    setup_logging,
    get_logger,
)
from llm_web_extract.utils.ids import generate_id

__all__ = [
    "EventLogger",
    "LogLine",
    "auxiliary",
    "setup_logging",
    "get_logger",
    "generate_id",
]
