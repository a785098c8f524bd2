"""
Configuration module - Centralized settings management.

Usage:
    from llm_web_extract.config import get_settings, load_config
    
    # Get global settings (loaded once)
    settings = get_settings()
    
    # Or load fresh settings with overrides
    settings = load_config(extract={"debug_dom": True})

Environment Variables:
    LLM_WEB_EXTRACT__LLM__MODEL=gpt-4o
    LLM_WEB_EXTRACT__LLM__BASE_URL=https://api.openai.com
    LLM_WEB_EXTRACT__EXTRACT__DOM_SETTLE_TIMEOUT_MS=10000
    OPENAI_API_KEY=sk-...
"""

from llm_web_extract.config.settings import (
    Settings,
    BrowserSettings,
    LLMSettings,
    ExtractSettings,
    LoggingSettings,
    DEFAULT_VISION_MODELS,
)
from llm_web_extract.config.loader import ConfigLoader, load_config

_settings: Settings | None = None


def get_settings() -> Settings:
    """
    Get the global settings instance (singleton).
    
    Call reset_settings() to reload.
    """
    global _settings
    if _settings is None:
        _settings = load_config()
    return _settings


def reset_settings() -> None:
    """Reset the global settings (forces reload on next get_settings())."""
    global _settings
    _settings = None


__all__ = [
    "Settings",
    "BrowserSettings",
    "LLMSettings",
    "ExtractSettings",
    "LoggingSettings",
    "DEFAULT_VISION_MODELS",
    "ConfigLoader",
    "load_config",
    "get_settings",
    "reset_settings",
]
