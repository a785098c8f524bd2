"""
Page Session - Extraction and observation bound to one page.

The session wires the default collaborators to a Playwright page and owns
the observation store for its lifetime. The store is created on entry and
cleared on exit.

Example:
    >>> async with PageSession(page) as session:
    ...     product = await session.extract("the product name and price", Product)
    ...     buttons = await session.observe("the add-to-cart button")
"""

from typing import TYPE_CHECKING, List, Optional, Type, TypeVar
import logging

from pydantic import BaseModel

from llm_web_extract.config import Settings, get_settings
from llm_web_extract.dom.chunker import PlaywrightDomChunkProvider
from llm_web_extract.dom.settle import DomSettleWaiter
from llm_web_extract.exceptions import LLMWebExtractError
from llm_web_extract.handlers.capabilities import ModelCapabilities
from llm_web_extract.handlers.extract import ExtractHandler
from llm_web_extract.handlers.observe import ObserveHandler
from llm_web_extract.handlers.store import ObservationStore
from llm_web_extract.inference.schemas import ObservedElement
from llm_web_extract.inference.service import LLMInferenceService
from llm_web_extract.interfaces.dom import IDomChunkProvider, IDomSettleWaiter
from llm_web_extract.interfaces.inference import IInferenceService
from llm_web_extract.interfaces.llm import ILLMProvider
from llm_web_extract.interfaces.vision import IVisionAnnotator
from llm_web_extract.llm.openai_provider import OpenAIProvider
from llm_web_extract.utils.logging import EventLogger

if TYPE_CHECKING:
    from playwright.async_api import Page

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class PageSession:
    """
    Extract and observe on a single page.
    
    Any collaborator left as None is built from settings. An LLM provider
    created by the session is closed when the session exits.
    """
    
    def __init__(
        self,
        page: "Page",
        settings: Optional[Settings] = None,
        llm_provider: Optional[ILLMProvider] = None,
        inference: Optional[IInferenceService] = None,
        chunk_provider: Optional[IDomChunkProvider] = None,
        settle_waiter: Optional[IDomSettleWaiter] = None,
        annotator: Optional[IVisionAnnotator] = None,
        capabilities: Optional[ModelCapabilities] = None,
        event_logger: Optional[EventLogger] = None,
    ):
        self._page = page
        self._settings = settings or get_settings()
        self._llm = llm_provider
        self._inference = inference
        self._chunk_provider = chunk_provider
        self._settle_waiter = settle_waiter
        self._annotator = annotator
        self._capabilities = capabilities
        self._event_logger = event_logger or EventLogger()
        
        self._owns_llm = False
        self._store: Optional[ObservationStore] = None
        self._extract_handler: Optional[ExtractHandler] = None
        self._observe_handler: Optional[ObserveHandler] = None
    
    @property
    def store(self) -> ObservationStore:
        if self._store is None:
            raise LLMWebExtractError("Session is not open")
        return self._store
    
    @property
    def is_open(self) -> bool:
        return self._store is not None
    
    def _build_llm(self) -> ILLMProvider:
        llm = self._settings.llm
        self._owns_llm = True
        return OpenAIProvider(
            base_url=llm.base_url,
            model=llm.model,
            api_key=llm.api_key.get_secret_value() if llm.api_key else None,
            timeout=llm.timeout,
        )
    
    async def open(self) -> "PageSession":
        if self.is_open:
            return self
        
        cfg = self._settings.extract
        if self._inference is None:
            if self._llm is None:
                self._llm = self._build_llm()
            self._inference = LLMInferenceService(
                self._llm,
                temperature=self._settings.llm.temperature,
                max_tokens=self._settings.llm.max_tokens,
            )
        chunk_provider = self._chunk_provider or PlaywrightDomChunkProvider(
            self._page, debug_dom=cfg.debug_dom
        )
        settle_waiter = self._settle_waiter or DomSettleWaiter(
            self._page,
            default_timeout_ms=cfg.dom_settle_timeout_ms,
            quiet_ms=cfg.dom_quiet_ms,
        )
        
        self._store = ObservationStore()
        self._extract_handler = ExtractHandler(
            chunk_provider=chunk_provider,
            settle_waiter=settle_waiter,
            inference=self._inference,
            event_logger=self._event_logger,
            default_model_name=self._settings.llm.model,
            default_dom_settle_timeout_ms=cfg.dom_settle_timeout_ms,
        )
        self._observe_handler = ObserveHandler(
            page=self._page,
            chunk_provider=chunk_provider,
            settle_waiter=settle_waiter,
            inference=self._inference,
            store=self._store,
            capabilities=self._capabilities or ModelCapabilities.from_settings(self._settings),
            default_model_name=self._settings.llm.model,
            annotator=self._annotator,
            event_logger=self._event_logger,
            selector_prefix=cfg.selector_prefix,
            default_dom_settle_timeout_ms=cfg.dom_settle_timeout_ms,
        )
        logger.debug("Page session opened")
        return self
    
    async def close(self) -> None:
        if self._store is not None:
            self._store.clear()
        self._store = None
        self._extract_handler = None
        self._observe_handler = None
        
        if self._owns_llm and self._llm is not None:
            await self._llm.close()
            self._llm = None
            self._inference = None
            self._owns_llm = False
        logger.debug("Page session closed")
    
    async def __aenter__(self) -> "PageSession":
        return await self.open()
    
    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
    
    async def extract(
        self,
        instruction: str,
        schema: Type[T],
        model_name: Optional[str] = None,
        dom_settle_timeout_ms: Optional[int] = None,
        request_id: Optional[str] = None,
    ) -> T:
        """Extract structured data. See ExtractHandler.extract."""
        if self._extract_handler is None:
            raise LLMWebExtractError("Session is not open")
        return await self._extract_handler.extract(
            instruction,
            schema,
            model_name=model_name,
            dom_settle_timeout_ms=dom_settle_timeout_ms,
            request_id=request_id,
        )
    
    async def observe(
        self,
        instruction: Optional[str] = None,
        use_vision: bool = False,
        full_page: bool = False,
        model_name: Optional[str] = None,
        request_id: Optional[str] = None,
        dom_settle_timeout_ms: Optional[int] = None,
    ) -> List[ObservedElement]:
        """Find actionable elements. See ObserveHandler.observe."""
        if self._observe_handler is None:
            raise LLMWebExtractError("Session is not open")
        return await self._observe_handler.observe(
            instruction=instruction,
            use_vision=use_vision,
            full_page=full_page,
            model_name=model_name,
            request_id=request_id,
            dom_settle_timeout_ms=dom_settle_timeout_ms,
        )
