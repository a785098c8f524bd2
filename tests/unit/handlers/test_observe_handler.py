"""
Tests for ObserveHandler - element observation and locator resolution.
"""

import pytest
from typing import Any, Dict, List, Optional, Sequence

from llm_web_extract.exceptions import UnknownElementError, InferenceFailure
from llm_web_extract.handlers.capabilities import ModelCapabilities
from llm_web_extract.handlers.observe import ObserveHandler
from llm_web_extract.handlers.store import ObservationStore
from llm_web_extract.inference.prompts import DEFAULT_OBSERVE_INSTRUCTION, VISION_PLACEHOLDER
from llm_web_extract.inference.schemas import ObservedElement
from llm_web_extract.interfaces.dom import DomChunk, DomSnapshot, IDomChunkProvider, IDomSettleWaiter
from llm_web_extract.interfaces.inference import IInferenceService
from llm_web_extract.interfaces.vision import IVisionAnnotator
from llm_web_extract.utils.ids import generate_id
from llm_web_extract.utils.logging import EventLogger, LogLine


SELECTOR_MAP = {
    "0": ["/html[1]/body[1]/a[1]", "//a[@id='home']"],
    "1": ["/html[1]/body[1]/button[1]"],
    "2": ["/html[1]/body[1]/input[1]"],
}


class MockChunkProvider(IDomChunkProvider):
    def __init__(self):
        self.snapshots: List[bool] = []

    async def next_chunk(self, chunks_seen: Sequence[int]) -> DomChunk:
        raise AssertionError("observation must not consume chunks")

    async def snapshot(self, full_page: bool) -> DomSnapshot:
        self.snapshots.append(full_page)
        return DomSnapshot(output_string="0:<a>Home</a>\n1:<button>Go</button>", selector_map=SELECTOR_MAP)


class MockSettleWaiter(IDomSettleWaiter):
    async def wait(self, timeout_ms: Optional[int] = None) -> None:
        return None


class MockInference(IInferenceService):
    def __init__(self, elements: List[Dict[str, Any]]):
        self._elements = elements
        self.observe_calls: List[Dict[str, Any]] = []

    async def extract(self, **kwargs: Any) -> Dict[str, Any]:
        raise AssertionError("observation must not extract")

    async def observe(self, **kwargs: Any) -> List[Dict[str, Any]]:
        self.observe_calls.append(kwargs)
        return self._elements


class MockAnnotator(IVisionAnnotator):
    def __init__(self):
        self.calls: List[tuple] = []

    async def annotate(self, page: Any, selector_map: Dict[str, List[str]], full_page: bool) -> bytes:
        self.calls.append((page, selector_map, full_page))
        return b"\x89PNG"


@pytest.fixture
def page():
    return object()


@pytest.fixture
def lines() -> List[LogLine]:
    return []


def make_handler(page, inference, lines=None, store=None, annotator=None, vision_models=("gpt-4o",), model="gpt-4o"):
    return ObserveHandler(
        page=page,
        chunk_provider=MockChunkProvider(),
        settle_waiter=MockSettleWaiter(),
        inference=inference,
        store=store if store is not None else ObservationStore(),
        capabilities=ModelCapabilities.with_vision(vision_models),
        default_model_name=model,
        annotator=annotator or MockAnnotator(),
        event_logger=EventLogger(sinks=[lines.append] if lines is not None else None),
    )


class TestResolution:
    """Test element id to selector resolution."""

    @pytest.mark.asyncio
    async def test_resolves_first_candidate_with_xpath_prefix(self, page):
        """Each element gets 'xpath=' plus its preferred locator, in model order."""
        inference = MockInference([
            {"element_id": "1", "description": "Go button"},
            {"element_id": "0", "description": "Home link"},
        ])
        handler = make_handler(page, inference)

        result = await handler.observe("buttons and links")

        assert result == [
            ObservedElement(selector="xpath=/html[1]/body[1]/button[1]", description="Go button"),
            ObservedElement(selector="xpath=/html[1]/body[1]/a[1]", description="Home link"),
        ]

    @pytest.mark.asyncio
    async def test_integer_ids_resolve(self, page):
        """Numeric ids from the model resolve like their string form."""
        inference = MockInference([{"element_id": 2, "description": "Search"}])
        handler = make_handler(page, inference)

        result = await handler.observe("search box")

        assert result[0].selector == "xpath=/html[1]/body[1]/input[1]"

    @pytest.mark.asyncio
    async def test_unknown_id_fails_without_partial_result(self, page):
        """An id missing from the selector map is a LookupError and nothing is stored."""
        store = ObservationStore()
        inference = MockInference([
            {"element_id": "0", "description": "Home"},
            {"element_id": "99", "description": "Ghost"},
        ])
        handler = make_handler(page, inference, store=store)

        with pytest.raises(UnknownElementError) as exc_info:
            await handler.observe("links")

        assert isinstance(exc_info.value, LookupError)
        assert exc_info.value.element_id == "99"
        assert len(store) == 0

    @pytest.mark.asyncio
    async def test_inference_failure_propagates(self, page):
        """Upstream failures surface unchanged."""
        class FailingInference(MockInference):
            async def observe(self, **kwargs: Any) -> List[Dict[str, Any]]:
                raise InferenceFailure("bad gateway")

        handler = make_handler(page, FailingInference([]))

        with pytest.raises(InferenceFailure):
            await handler.observe("links")


class TestInstructionAndScope:
    """Test defaulting and page scope."""

    @pytest.mark.asyncio
    async def test_empty_instruction_uses_default_prompt(self, page):
        """No instruction asks for every actionable element."""
        inference = MockInference([])
        handler = make_handler(page, inference)

        await handler.observe("")

        assert inference.observe_calls[0]["instruction"] == DEFAULT_OBSERVE_INSTRUCTION
        assert DEFAULT_OBSERVE_INSTRUCTION.startswith("Find elements that can be used for any future actions")

    @pytest.mark.asyncio
    async def test_full_page_reaches_provider(self, page):
        """The full_page flag selects the snapshot variant."""
        inference = MockInference([])
        handler = make_handler(page, inference)

        await handler.observe("links", full_page=True)
        await handler.observe("links")

        assert handler._chunks.snapshots == [True, False]

    @pytest.mark.asyncio
    async def test_sends_dom_text_without_vision(self, page):
        """Without vision the serialized DOM is sent and no image."""
        inference = MockInference([])
        handler = make_handler(page, inference)

        await handler.observe("links", request_id="r-9")

        call = inference.observe_calls[0]
        assert call["dom_elements"].startswith("0:<a>Home</a>")
        assert call["image"] is None
        assert call["model_name"] == "gpt-4o"
        assert call["request_id"] == "r-9"


class TestVision:
    """Test the vision path and its downgrade."""

    @pytest.mark.asyncio
    async def test_vision_model_gets_annotated_screenshot(self, page):
        """A vision model receives the image and the placeholder text."""
        annotator = MockAnnotator()
        inference = MockInference([{"element_id": "1", "description": "Go"}])
        handler = make_handler(page, inference, annotator=annotator)

        await handler.observe("the go button", use_vision=True, full_page=True)

        assert annotator.calls == [(page, SELECTOR_MAP, True)]
        call = inference.observe_calls[0]
        assert call["image"] == b"\x89PNG"
        assert call["dom_elements"] == VISION_PLACEHOLDER

    @pytest.mark.asyncio
    async def test_non_vision_model_downgrades(self, page, lines):
        """A non-vision model logs once, skips the annotator, and returns the text result."""
        annotator = MockAnnotator()
        elements = [{"element_id": "1", "description": "Go"}]

        downgraded = make_handler(page, MockInference(elements), lines=lines, annotator=annotator, model="gpt-3.5-turbo")
        plain = make_handler(page, MockInference(elements), model="gpt-3.5-turbo")

        vision_result = await downgraded.observe("the go button", use_vision=True)
        text_result = await plain.observe("the go button", use_vision=False)

        assert vision_result == text_result
        assert annotator.calls == []
        downgrade_lines = [line for line in lines if "does not support vision" in line.message]
        assert len(downgrade_lines) == 1
        assert downgrade_lines[0].auxiliary["model"]["value"] == "gpt-3.5-turbo"

    @pytest.mark.asyncio
    async def test_model_override_checks_capability(self, page, lines):
        """The capability check uses the per-call model."""
        annotator = MockAnnotator()
        handler = make_handler(page, MockInference([]), lines=lines, annotator=annotator, model="gpt-4o")

        await handler.observe("links", use_vision=True, model_name="text-only")

        assert annotator.calls == []
        assert any("does not support vision" in line.message for line in lines)


class TestRecording:
    """Test the observation store integration."""

    @pytest.mark.asyncio
    async def test_same_instruction_overwrites(self, page):
        """Observing twice with the same instruction keeps one entry with the latest result."""
        store = ObservationStore()
        first = make_handler(page, MockInference([{"element_id": "0", "description": "Home"}]), store=store)
        second = make_handler(page, MockInference([{"element_id": "1", "description": "Go"}]), store=store)

        await first.observe("the main action")
        await second.observe("the main action")

        obs_id = generate_id("the main action")
        assert len(store) == 1
        assert store.get(obs_id).result == [
            ObservedElement(selector="xpath=/html[1]/body[1]/button[1]", description="Go"),
        ]

    @pytest.mark.asyncio
    async def test_default_instruction_is_recorded(self, page):
        """The substituted default instruction is what gets stored."""
        store = ObservationStore()
        handler = make_handler(page, MockInference([]), store=store)

        await handler.observe()

        assert generate_id(DEFAULT_OBSERVE_INSTRUCTION) in store

    @pytest.mark.asyncio
    async def test_found_elements_logged(self, page, lines):
        """A 'found elements' event carries the resolved list."""
        handler = make_handler(page, MockInference([{"element_id": "0", "description": "Home"}]), lines=lines)

        await handler.observe("home")

        found = [line for line in lines if line.message == "found elements"]
        assert len(found) == 1
        assert found[0].category == "observation"
        assert "xpath=/html[1]/body[1]/a[1]" in found[0].auxiliary["elements"]["value"]
