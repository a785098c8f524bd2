"""
Settings - Pydantic models for type-safe configuration.

This module defines all configuration settings as Pydantic models,
providing validation, type hints, and automatic environment variable loading.

Example:
    >>> from llm_web_extract.config import Settings, load_config
    >>> settings = load_config()  # Loads from env, yaml, and defaults
    >>> print(settings.extract.dom_settle_timeout_ms)
    30000
"""

from typing import List, Literal, Optional
from pydantic import BaseModel, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_VISION_MODELS = [
    "gpt-4o",
    "gpt-4o-mini",
    "gpt-4o-2024-08-06",
    "gpt-4.1",
    "gpt-4.1-mini",
    "claude-3-5-sonnet-latest",
    "claude-3-5-sonnet-20240620",
    "claude-3-5-sonnet-20241022",
]


class BrowserSettings(BaseModel):
    """
    Browser settings used by the CLI.
    
    Attributes:
        headless: Run browser in headless mode
        browser_type: Playwright browser type
        timeout_ms: Default navigation timeout
        viewport_width: Browser viewport width in pixels
        viewport_height: Browser viewport height in pixels
    """
    headless: bool = True
    browser_type: Literal["chromium", "firefox", "webkit"] = "chromium"
    timeout_ms: int = Field(default=30000, ge=1000, le=300000)
    viewport_width: int = Field(default=1280, ge=320, le=3840)
    viewport_height: int = Field(default=720, ge=240, le=2160)


class LLMSettings(BaseModel):
    """
    LLM provider settings.
    
    Attributes:
        base_url: OpenAI-compatible API endpoint
        model: Default model name
        api_key: API key (falls back to OPENAI_API_KEY)
        temperature: Sampling temperature
        max_tokens: Maximum tokens in response
        timeout: Request timeout in seconds
    """
    base_url: str = "https://api.openai.com"
    model: str = "gpt-4o"
    api_key: Optional[SecretStr] = None
    temperature: float = Field(default=0.1, ge=0.0, le=2.0)
    max_tokens: int = Field(default=4096, ge=1, le=128000)
    timeout: int = Field(default=120, ge=5, le=600)


class ExtractSettings(BaseModel):
    """
    Extraction and observation behavior.
    
    Attributes:
        dom_settle_timeout_ms: Upper bound for each DOM settle wait (0 skips the wait)
        dom_quiet_ms: Mutation-free window that counts as settled
        debug_dom: Outline processed elements on the page
        vision_models: Model ids that accept image input
        selector_prefix: Locator scheme tag prepended to resolved selectors
    """
    dom_settle_timeout_ms: int = Field(default=30000, ge=0, le=600000)
    dom_quiet_ms: int = Field(default=500, ge=0, le=10000)
    debug_dom: bool = False
    vision_models: List[str] = Field(default_factory=lambda: list(DEFAULT_VISION_MODELS))
    selector_prefix: str = "xpath="


class LoggingSettings(BaseModel):
    """
    Logging configuration.
    
    Attributes:
        level: Log level
        file: Log file path (None for console only)
        json_format: Use JSON format for file logs
    """
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    file: Optional[str] = None
    json_format: bool = False


class Settings(BaseSettings):
    """
    Root settings container.
    
    Settings are loaded in this priority order (highest to lowest):
    1. Explicit values passed to constructor
    2. Environment variables (prefixed with LLM_WEB_EXTRACT__)
    3. Config file (YAML)
    4. Default values
    """
    
    model_config = SettingsConfigDict(
        env_prefix="LLM_WEB_EXTRACT__",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )
    
    browser: BrowserSettings = Field(default_factory=BrowserSettings)
    llm: LLMSettings = Field(default_factory=LLMSettings)
    extract: ExtractSettings = Field(default_factory=ExtractSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    
    debug: bool = False
    
    def merge_with(self, overrides: dict) -> "Settings":
        """
        Create a new Settings instance with overrides applied.
        
        Args:
            overrides: Dictionary of values to override
            
        Returns:
            New Settings instance with overrides applied
        """
        current = self.model_dump()
        if self.llm.api_key is not None:
            current["llm"]["api_key"] = self.llm.api_key.get_secret_value()

        merged = deep_merge(current, overrides)
        return Settings(**merged)


def deep_merge(base: dict, updates: dict) -> dict:
    """Recursively merge ``updates`` into ``base`` (in place) and return it."""
    for key, value in updates.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            deep_merge(base[key], value)
        else:
            base[key] = value
    return base
