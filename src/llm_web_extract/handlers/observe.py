"""
Observe Handler - Find actionable elements and resolve their locators.
"""

from typing import TYPE_CHECKING, Any, List, Optional
import logging

from llm_web_extract.exceptions import UnknownElementError
from llm_web_extract.handlers.capabilities import VISION, ModelCapabilities
from llm_web_extract.handlers.store import ObservationStore
from llm_web_extract.inference.prompts import DEFAULT_OBSERVE_INSTRUCTION, VISION_PLACEHOLDER
from llm_web_extract.inference.schemas import ObservedElement
from llm_web_extract.interfaces.dom import IDomChunkProvider, IDomSettleWaiter, SelectorMap
from llm_web_extract.interfaces.inference import IInferenceService
from llm_web_extract.interfaces.vision import IVisionAnnotator
from llm_web_extract.utils.logging import EventLogger
from llm_web_extract.vision.screenshot import ScreenshotAnnotator

if TYPE_CHECKING:
    from playwright.async_api import Page

logger = logging.getLogger(__name__)

CATEGORY = "observation"


class ObserveHandler:
    """
    Single-shot element observation with optional vision input.

    Vision is used only when the model supports it; otherwise the request
    is downgraded to text with a log entry. Every element id in the model's
    answer must resolve through the selector map.

    Example:
        >>> handler = ObserveHandler(page, provider, waiter, inference, store,
        ...                          ModelCapabilities.with_vision(["gpt-4o"]),
        ...                          default_model_name="gpt-4o")
        >>> elements = await handler.observe("the search box")
        >>> elements[0].selector
        'xpath=/html[1]/body[1]/form[1]/input[1]'
    """

    def __init__(
        self,
        page: "Page",
        chunk_provider: IDomChunkProvider,
        settle_waiter: IDomSettleWaiter,
        inference: IInferenceService,
        store: ObservationStore,
        capabilities: ModelCapabilities,
        default_model_name: str,
        annotator: Optional[IVisionAnnotator] = None,
        event_logger: Optional[EventLogger] = None,
        selector_prefix: str = "xpath=",
        default_dom_settle_timeout_ms: Optional[int] = None,
    ):
        self._page = page
        self._chunks = chunk_provider
        self._settle = settle_waiter
        self._inference = inference
        self._store = store
        self._capabilities = capabilities
        self._default_model_name = default_model_name
        self._annotator = annotator or ScreenshotAnnotator()
        self._log = event_logger or EventLogger()
        self._selector_prefix = selector_prefix
        self._default_settle_timeout = default_dom_settle_timeout_ms

    @property
    def store(self) -> ObservationStore:
        return self._store

    async def observe(
        self,
        instruction: Optional[str] = None,
        use_vision: bool = False,
        full_page: bool = False,
        model_name: Optional[str] = None,
        request_id: Optional[str] = None,
        dom_settle_timeout_ms: Optional[int] = None,
    ) -> List[ObservedElement]:
        """
        Find elements on the page matching an instruction.

        Args:
            instruction: What to look for; empty asks for every actionable element
            use_vision: Send an annotated screenshot instead of DOM text
            full_page: Cover the whole page rather than the first chunk
            model_name: Model override for this call
            request_id: Correlation id passed to the inference service
            dom_settle_timeout_ms: Settle bound override for this call

        Returns:
            Elements with resolved selectors, in the model's order

        Raises:
            UnknownElementError: If the model names an element id not on the page
        """
        if not instruction:
            instruction = DEFAULT_OBSERVE_INSTRUCTION

        model = model_name or self._default_model_name
        timeout = dom_settle_timeout_ms if dom_settle_timeout_ms is not None else self._default_settle_timeout

        self._log(CATEGORY, "starting observation", level=1, instruction=instruction)

        await self._settle.wait(timeout)
        await self._chunks.start_debug()
        try:
            snapshot = await self._chunks.snapshot(full_page)
            output_string = snapshot.output_string

            image: Optional[bytes] = None
            if use_vision:
                if not self._capabilities.supports(model, VISION):
                    self._log(
                        CATEGORY,
                        "Model does not support vision. Skipping vision processing.",
                        level=1,
                        model=model,
                    )
                else:
                    image = await self._annotator.annotate(
                        self._page, snapshot.selector_map, full_page
                    )
                    output_string = VISION_PLACEHOLDER

            elements = await self._inference.observe(
                instruction=instruction,
                dom_elements=output_string,
                model_name=model,
                image=image,
                request_id=request_id,
            )

            resolved = [self._resolve(element, snapshot.selector_map) for element in elements]
        finally:
            await self._chunks.cleanup_debug()

        self._log(
            CATEGORY,
            "found elements",
            level=1,
            elements=[element.model_dump() for element in resolved],
        )

        self._store.record(instruction, resolved)
        return resolved

    def _resolve(self, element: Any, selector_map: SelectorMap) -> ObservedElement:
        element_id = str(element["element_id"])
        candidates = selector_map.get(element_id)
        if not candidates:
            raise UnknownElementError(
                f"Element id {element_id} is not in the selector map",
                element_id=element_id,
            )
        return ObservedElement(
            selector=f"{self._selector_prefix}{candidates[0]}",
            description=element.get("description", ""),
        )
