"""
Vision - Annotated screenshots for vision-capable models.
"""

from llm_web_extract.vision.screenshot import ScreenshotAnnotator, ANNOTATION_CONTAINER_ID

__all__ = [
    "ScreenshotAnnotator",
    "ANNOTATION_CONTAINER_ID",
]
