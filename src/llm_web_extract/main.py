"""
LLM Web Extract - CLI Entry Point.

Configuration Priority:
    1. CLI arguments (--model, --visible, etc.)
    2. Environment variables (LLM_WEB_EXTRACT__LLM__MODEL, etc.)
    3. Config file (config.yaml)

Usage:
    llm-web-extract extract https://example.com "the page heading"
    llm-web-extract extract https://shop.example "all product names" --schema myapp.schemas:Products
    llm-web-extract observe https://example.com "the login button" --vision
"""

import asyncio
import importlib
import json
from typing import Any, Awaitable, Callable, Optional, Type

import typer
from playwright.async_api import async_playwright
from pydantic import BaseModel
from rich.console import Console
from rich.markup import escape

from llm_web_extract import __version__
from llm_web_extract.config import Settings, load_config
from llm_web_extract.core.session import PageSession
from llm_web_extract.exceptions import LLMWebExtractError
from llm_web_extract.utils.logging import setup_logging

app = typer.Typer(
    name="llm-web-extract",
    help="Extract structured data and actionable elements from web pages with LLMs",
    add_completion=False,
)

console = Console()


class ExtractedText(BaseModel):
    """Schema used when no --schema is given."""
    extraction: str


def load_schema(path: Optional[str]) -> Type[BaseModel]:
    """
    Import a Pydantic model from a "package.module:ClassName" path.
    """
    if not path:
        return ExtractedText

    module_name, _, class_name = path.partition(":")
    if not module_name or not class_name:
        raise typer.BadParameter("Schema must look like 'package.module:ClassName'")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise typer.BadParameter(f"Cannot import {module_name}: {e}") from e

    schema = getattr(module, class_name, None)
    if not (isinstance(schema, type) and issubclass(schema, BaseModel)):
        raise typer.BadParameter(f"{path} is not a Pydantic model")
    return schema


def _settings(model: Optional[str], visible: bool, verbose: bool) -> Settings:
    overrides: dict = {}
    if model:
        overrides["llm"] = {"model": model}
    if visible:
        overrides["browser"] = {"headless": False}
    if verbose:
        overrides["logging"] = {"level": "DEBUG"}
    settings = load_config(**overrides)
    setup_logging(
        level=settings.logging.level,
        log_file=settings.logging.file,
        json_format=settings.logging.json_format,
    )
    return settings


async def _on_page(
    settings: Settings,
    url: str,
    action: Callable[[PageSession], Awaitable[Any]],
) -> Any:
    async with async_playwright() as playwright:
        launcher = getattr(playwright, settings.browser.browser_type)
        browser = await launcher.launch(headless=settings.browser.headless)
        try:
            page = await browser.new_page(
                viewport={
                    "width": settings.browser.viewport_width,
                    "height": settings.browser.viewport_height,
                }
            )
            await page.goto(url, timeout=settings.browser.timeout_ms)
            async with PageSession(page, settings=settings) as session:
                return await action(session)
        finally:
            await browser.close()


def _run(coro: Awaitable[Any]) -> Any:
    try:
        return asyncio.run(coro)
    except LLMWebExtractError as e:
        console.print(f"[red]✗ {escape(str(e))}[/red]")
        raise typer.Exit(1)


@app.command()
def extract(
    url: str = typer.Argument(..., help="Page to load"),
    instruction: str = typer.Argument(..., help="What to extract"),
    schema: Optional[str] = typer.Option(None, "--schema", "-s", help="Pydantic model as package.module:ClassName"),
    model: Optional[str] = typer.Option(None, "--model", "-m", help="LLM model (default: from config)"),
    visible: bool = typer.Option(False, "--visible", "-v", help="Run with visible browser"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose output"),
):
    """
    Extract structured data from a page.

    Examples:
        llm-web-extract extract https://news.ycombinator.com "the top story title"
    """
    schema_cls = load_schema(schema)
    settings = _settings(model, visible, verbose)

    result = _run(_on_page(settings, url, lambda session: session.extract(instruction, schema_cls)))
    console.print_json(result.model_dump_json())


@app.command()
def observe(
    url: str = typer.Argument(..., help="Page to load"),
    instruction: Optional[str] = typer.Argument(None, help="Elements to look for (default: everything actionable)"),
    vision: bool = typer.Option(False, "--vision", help="Send an annotated screenshot"),
    full_page: bool = typer.Option(False, "--full-page", help="Cover the whole page"),
    model: Optional[str] = typer.Option(None, "--model", "-m", help="LLM model (default: from config)"),
    visible: bool = typer.Option(False, "--visible", "-v", help="Run with visible browser"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose output"),
):
    """
    List actionable elements and their selectors.

    Examples:
        llm-web-extract observe https://example.com "the sign in link"
        llm-web-extract observe https://example.com --full-page --vision
    """
    settings = _settings(model, visible, verbose)

    elements = _run(_on_page(
        settings,
        url,
        lambda session: session.observe(instruction, use_vision=vision, full_page=full_page),
    ))
    console.print_json(json.dumps([element.model_dump() for element in elements]))


@app.command()
def version():
    """Show version information."""
    console.print(f"[bold]LLM Web Extract[/bold] v{__version__}")


if __name__ == "__main__":
    app()
