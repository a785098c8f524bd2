"""
Extract Handler - Chunked structured extraction from the live page.

The page is consumed one DOM chunk per round. Each round sends the new
chunk, the content merged so far, and the model's own progress note to
the inference service. The loop ends as soon as the model reports the
instruction as completed, or when every chunk has been seen.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Type, TypeVar
import logging

from pydantic import BaseModel, ValidationError

from llm_web_extract.exceptions import ChunkPartitionChangedError, InvalidResponseError
from llm_web_extract.handlers.merge import merge_partial
from llm_web_extract.inference.schemas import ExtractionMetadata
from llm_web_extract.interfaces.dom import DomChunk, IDomChunkProvider, IDomSettleWaiter
from llm_web_extract.interfaces.inference import IInferenceService
from llm_web_extract.utils.logging import EventLogger

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

CATEGORY = "extraction"


@dataclass
class ExtractionState:
    """
    Accumulator for one extract() call.

    Attributes:
        instruction: What to extract
        progress: Latest progress note from the model
        content: Merged partial content, without metadata
        chunks_seen: Chunk indices consumed so far, in order
        partition: Chunk indices reported by the first round
    """
    instruction: str
    progress: str = ""
    content: Dict[str, Any] = field(default_factory=dict)
    chunks_seen: List[int] = field(default_factory=list)
    partition: Optional[List[int]] = None

    @property
    def total_chunks(self) -> int:
        return len(self.partition or [])

    @property
    def exhausted(self) -> bool:
        return self.partition is not None and len(self.chunks_seen) == self.total_chunks


class ExtractHandler:
    """
    Drive the chunk-by-chunk extraction loop.

    Example:
        >>> handler = ExtractHandler(
        ...     chunk_provider=PlaywrightDomChunkProvider(page),
        ...     settle_waiter=DomSettleWaiter(page),
        ...     inference=LLMInferenceService(provider),
        ... )
        >>> article = await handler.extract("the article title and author", Article)
    """

    def __init__(
        self,
        chunk_provider: IDomChunkProvider,
        settle_waiter: IDomSettleWaiter,
        inference: IInferenceService,
        event_logger: Optional[EventLogger] = None,
        default_model_name: Optional[str] = None,
        default_dom_settle_timeout_ms: Optional[int] = None,
    ):
        """
        Args:
            chunk_provider: Serializes the page into chunks
            settle_waiter: Waits for DOM quiescence before each round
            inference: Performs the per-round extract call
            event_logger: Structured event sink (defaults to stdlib logging only)
            default_model_name: Model used when extract() names none
            default_dom_settle_timeout_ms: Settle bound used when extract() names none
        """
        self._chunks = chunk_provider
        self._settle = settle_waiter
        self._inference = inference
        self._log = event_logger or EventLogger()
        self._default_model_name = default_model_name
        self._default_settle_timeout = default_dom_settle_timeout_ms

    async def extract(
        self,
        instruction: str,
        schema: Type[T],
        model_name: Optional[str] = None,
        dom_settle_timeout_ms: Optional[int] = None,
        request_id: Optional[str] = None,
    ) -> T:
        """
        Extract data matching ``schema`` from the current page.

        Args:
            instruction: What to extract, in natural language
            schema: Pydantic model describing the result
            model_name: Model override for this call
            dom_settle_timeout_ms: Settle bound override for this call
            request_id: Correlation id passed to the inference service

        Returns:
            An instance of ``schema`` built from the merged content

        Raises:
            DomNotSettledError: If the page does not settle in time
            ChunkPartitionChangedError: If the chunk layout shifts mid-call
            InferenceFailure: If inference fails or the final content is invalid
        """
        model = model_name or self._default_model_name
        timeout = dom_settle_timeout_ms if dom_settle_timeout_ms is not None else self._default_settle_timeout
        state = ExtractionState(instruction=instruction)

        self._log(CATEGORY, "starting extraction", level=1, instruction=instruction)
        await self._settle.wait(timeout)

        while True:
            await self._chunks.start_debug()
            try:
                dom = await self._chunks.next_chunk(list(state.chunks_seen))
                self._check_partition(state, dom)

                self._log(
                    CATEGORY,
                    "received output from processDom.",
                    chunk=dom.chunk,
                    chunks_left=state.total_chunks - len(state.chunks_seen),
                    chunks_total=state.total_chunks,
                )

                response = await self._inference.extract(
                    instruction=instruction,
                    progress=state.progress,
                    previous_content=state.content,
                    dom_elements=dom.output_string,
                    schema=schema,
                    chunks_seen=len(state.chunks_seen),
                    chunks_total=state.total_chunks,
                    model_name=model,
                    request_id=request_id,
                )
            finally:
                await self._chunks.cleanup_debug()

            self._log(CATEGORY, "received extraction response", extraction_response=response)

            metadata = ExtractionMetadata.model_validate(response.get("metadata") or {})
            payload = {key: value for key, value in response.items() if key != "metadata"}

            state.chunks_seen.append(dom.chunk)
            state.content = merge_partial(schema, state.content, payload)
            state.progress = metadata.progress

            if metadata.completed or state.exhausted:
                self._log(CATEGORY, "got response", extraction_response=response)
                return self._finalize(schema, state)

            self._log(CATEGORY, "continuing extraction", extraction_response=response)
            await self._settle.wait(timeout)

    @staticmethod
    def _check_partition(state: ExtractionState, dom: DomChunk) -> None:
        """Snapshot the partition on the first round and hold later rounds to it."""
        if state.partition is None:
            state.partition = list(dom.chunks)
        elif list(dom.chunks) != state.partition:
            raise ChunkPartitionChangedError(
                "Chunk partition changed during extraction",
                expected=state.partition,
                actual=list(dom.chunks),
            )

        if dom.chunk not in state.partition or dom.chunk in state.chunks_seen:
            raise ChunkPartitionChangedError(
                f"Provider returned chunk {dom.chunk}, which is unknown or already seen",
                expected=state.partition,
                actual=list(dom.chunks),
            )

    @staticmethod
    def _finalize(schema: Type[T], state: ExtractionState) -> T:
        try:
            return schema.model_validate(state.content)
        except ValidationError as e:
            raise InvalidResponseError(
                f"Extracted content does not match {schema.__name__}: {e}",
                raw_response=str(state.content),
            ) from e
