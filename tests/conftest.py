"""
Pytest configuration and fixtures.
"""

import pytest


@pytest.fixture
def settings():
    """Provide test settings."""
    from llm_web_extract.config import Settings, LLMSettings, ExtractSettings
    
    return Settings(
        llm=LLMSettings(
            model="gpt-4o-mini",
            api_key="sk-test",
        ),
        extract=ExtractSettings(
            dom_settle_timeout_ms=1000,
            vision_models=["gpt-4o-mini"],
        ),
    )


@pytest.fixture(autouse=True)
def clean_settings():
    """Keep the settings singleton from leaking between tests."""
    from llm_web_extract.config import reset_settings
    
    reset_settings()
    yield
    reset_settings()
