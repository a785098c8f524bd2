"""
Screenshot Annotator - Label elements on a screenshot for vision models.

Draws a numbered box over every element in the selector map, captures a
PNG, and removes the overlay again.
"""

import logging
from typing import TYPE_CHECKING

from llm_web_extract.dom.scripts import ANNOTATE_JS, REMOVE_ANNOTATIONS_JS
from llm_web_extract.interfaces.dom import SelectorMap
from llm_web_extract.interfaces.vision import IVisionAnnotator

if TYPE_CHECKING:
    from playwright.async_api import Page

logger = logging.getLogger(__name__)

ANNOTATION_CONTAINER_ID = "llm-extract-annotations"


class ScreenshotAnnotator(IVisionAnnotator):
    """
    Produce annotated screenshots with Playwright.

    Example:
        >>> annotator = ScreenshotAnnotator()
        >>> png = await annotator.annotate(page, {"3": ["/html[1]/body[1]/a[1]"]}, full_page=False)
    """

    async def annotate(self, page: "Page", selector_map: SelectorMap, full_page: bool) -> bytes:
        labelled = await page.evaluate(
            ANNOTATE_JS,
            {"selectorMap": selector_map, "containerId": ANNOTATION_CONTAINER_ID},
        )
        logger.debug(f"Annotated {labelled} elements for screenshot")
        try:
            return await page.screenshot(full_page=full_page, type="png")
        finally:
            await page.evaluate(REMOVE_ANNOTATIONS_JS, ANNOTATION_CONTAINER_ID)
