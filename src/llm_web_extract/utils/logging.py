"""
Logging utilities for LLM Web Extract.

Besides the usual ``setup_logging``/``get_logger`` helpers this module
provides ``EventLogger``, which emits the structured ``LogLine`` events of
the extraction and observation handlers. Each event becomes a standard
logging record (with ``category`` and ``auxiliary`` extras) and is also
handed to any registered sink callables.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from rich.console import Console
from rich.logging import RichHandler

logger = logging.getLogger(__name__)

# Verbosity levels used by LogLine, mapped onto logging levels
_LEVELS = {
    0: logging.WARNING,
    1: logging.INFO,
    2: logging.DEBUG,
}


@dataclass
class LogLine:
    """
    A structured log event.
    
    Attributes:
        category: Event family ('extraction', 'observation', ...)
        message: Human-readable message
        level: Verbosity level (0 = always, 1 = normal, 2 = verbose)
        auxiliary: Named values, each as {"value": str, "type": str}
    """
    category: str
    message: str
    level: int = 2
    auxiliary: Dict[str, Dict[str, str]] = field(default_factory=dict)


def auxiliary(**values: Any) -> Dict[str, Dict[str, str]]:
    """
    Build an auxiliary mapping from keyword values.
    
    Example:
        >>> auxiliary(chunk=3)
        {'chunk': {'value': '3', 'type': 'integer'}}
    """
    result = {}
    for name, value in values.items():
        if isinstance(value, bool):
            result[name] = {"value": str(value).lower(), "type": "boolean"}
        elif isinstance(value, int):
            result[name] = {"value": str(value), "type": "integer"}
        elif isinstance(value, (dict, list)):
            result[name] = {"value": json.dumps(value, default=str), "type": "object"}
        else:
            result[name] = {"value": str(value), "type": "string"}
    return result


LogSink = Callable[[LogLine], None]


class EventLogger:
    """
    Emit LogLine events to stdlib logging and to optional sinks.
    
    Sinks are fire-and-forget: a failing sink never affects the caller.
    """
    
    def __init__(self, name: str = "llm_web_extract.events", sinks: Optional[List[LogSink]] = None):
        self._logger = logging.getLogger(name)
        self._sinks: List[LogSink] = list(sinks or [])
    
    def add_sink(self, sink: LogSink) -> None:
        self._sinks.append(sink)
    
    def emit(self, line: LogLine) -> None:
        level = _LEVELS.get(line.level, logging.DEBUG)
        self._logger.log(
            level,
            "[%s] %s",
            line.category,
            line.message,
            extra={"category": line.category, "auxiliary": line.auxiliary},
        )
        for sink in self._sinks:
            try:
                sink(line)
            except Exception as e:
                logger.debug(f"Log sink failed: {e}")
    
    def __call__(
        self,
        category: str,
        message: str,
        level: int = 2,
        **values: Any,
    ) -> None:
        """Shorthand: build the auxiliary mapping from keyword values and emit."""
        self.emit(LogLine(category=category, message=message, level=level, auxiliary=auxiliary(**values)))


class JsonFormatter(logging.Formatter):
    """Format records as one JSON object per line, including event extras."""
    
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "time": self.formatTime(record),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        category = getattr(record, "category", None)
        if category:
            payload["category"] = category
            payload["auxiliary"] = getattr(record, "auxiliary", {})
        return json.dumps(payload)


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    json_format: bool = False,
) -> None:
    """
    Configure logging for the application.
    
    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to log file
        json_format: Use JSON format for the file log
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    
    console = Console(stderr=True)
    console_handler = RichHandler(
        console=console,
        show_time=True,
        show_path=False,
        rich_tracebacks=True,
    )
    console_handler.setLevel(log_level)
    root_logger.addHandler(console_handler)
    
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(log_level)
        
        if json_format:
            formatter: logging.Formatter = JsonFormatter()
        else:
            formatter = logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            )
        
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the specified name."""
    return logging.getLogger(name)
