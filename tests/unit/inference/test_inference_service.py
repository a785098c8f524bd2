"""
Tests for LLMInferenceService - prompting and response parsing.
"""

import base64
import json
import pytest
from dataclasses import dataclass, field
from typing import Any, List, Optional

from pydantic import BaseModel

from llm_web_extract.exceptions import InvalidResponseError, LLMConnectionError
from llm_web_extract.handlers.merge import accumulating_field
from llm_web_extract.inference.service import LLMInferenceService
from llm_web_extract.interfaces.llm import MessageRole


# =============================================================================
# MOCK CLASSES THAT MATCH THE ACTUAL INTERFACES
# =============================================================================

@dataclass
class MockUsage:
    prompt_tokens: int = 100
    completion_tokens: int = 50
    total_tokens: int = 150


@dataclass
class MockLLMResponse:
    content: str
    model: str = "gpt-4o"
    usage: MockUsage = field(default_factory=MockUsage)


class MockLLMProvider:
    """Mock LLM provider matching ILLMProvider interface."""
    
    def __init__(self, responses: List[str], error: Optional[Exception] = None):
        self._responses = responses
        self._error = error
        self.calls: List[dict] = []
    
    @property
    def default_model(self) -> str:
        return "gpt-4o"
    
    async def complete(self, messages: List[Any], model: Optional[str] = None, **kwargs):
        self.calls.append({"messages": messages, "model": model, **kwargs})
        if self._error:
            raise self._error
        return MockLLMResponse(content=self._responses[len(self.calls) - 1])


class Product(BaseModel):
    name: str
    price: float
    reviews: List[str] = accumulating_field()


async def run_extract(service, **overrides):
    kwargs = dict(
        instruction="product name and price",
        progress="",
        previous_content={},
        dom_elements="0:<h1>Widget</h1>",
        schema=Product,
        chunks_seen=0,
        chunks_total=2,
    )
    kwargs.update(overrides)
    return await service.extract(**kwargs)


# =============================================================================
# TESTS
# =============================================================================

class TestExtract:
    """Test the extract call."""
    
    @pytest.mark.asyncio
    async def test_returns_fields_and_metadata(self):
        """Reported fields come back with the metadata block."""
        llm = MockLLMProvider(['{"name": "Widget", "price": 9.5, "metadata": {"progress": "got both", "completed": true}}'])
        service = LLMInferenceService(llm)
        
        result = await run_extract(service)
        
        assert result == {
            "name": "Widget",
            "price": 9.5,
            "metadata": {"progress": "got both", "completed": True},
        }
    
    @pytest.mark.asyncio
    async def test_partial_fields_only(self):
        """Fields the model left out are not invented."""
        llm = MockLLMProvider(['{"name": "Widget", "metadata": {"progress": "", "completed": false}}'])
        service = LLMInferenceService(llm)
        
        result = await run_extract(service)
        
        assert result == {"name": "Widget", "metadata": {"progress": "", "completed": False}}
    
    @pytest.mark.asyncio
    async def test_code_fenced_json(self):
        """Markdown code fences around JSON are tolerated."""
        llm = MockLLMProvider(['```json\n{"price": 3, "metadata": {"completed": true}}\n```'])
        service = LLMInferenceService(llm)
        
        result = await run_extract(service)
        
        assert result["price"] == 3.0
        assert result["metadata"]["completed"] is True
    
    @pytest.mark.asyncio
    async def test_missing_metadata_is_invalid(self):
        llm = MockLLMProvider(['{"name": "Widget"}'])
        service = LLMInferenceService(llm)
        
        with pytest.raises(InvalidResponseError):
            await run_extract(service)
    
    @pytest.mark.asyncio
    async def test_wrong_field_type_is_invalid(self):
        llm = MockLLMProvider(['{"price": "cheap", "metadata": {"completed": false}}'])
        service = LLMInferenceService(llm)
        
        with pytest.raises(InvalidResponseError):
            await run_extract(service)
    
    @pytest.mark.asyncio
    async def test_non_json_is_invalid(self):
        llm = MockLLMProvider(["I could not find it"])
        service = LLMInferenceService(llm)
        
        with pytest.raises(InvalidResponseError) as exc_info:
            await run_extract(service)
        
        assert exc_info.value.raw_response == "I could not find it"
    
    @pytest.mark.asyncio
    async def test_empty_reply_is_invalid(self):
        llm = MockLLMProvider(["   "])
        service = LLMInferenceService(llm)
        
        with pytest.raises(InvalidResponseError):
            await run_extract(service)
    
    @pytest.mark.asyncio
    async def test_provider_error_propagates(self):
        llm = MockLLMProvider([], error=LLMConnectionError("down", status_code=503))
        service = LLMInferenceService(llm)
        
        with pytest.raises(LLMConnectionError):
            await run_extract(service)
    
    @pytest.mark.asyncio
    async def test_prompt_contents(self):
        """The prompt carries instruction, progress, prior content, chunk position and schema."""
        llm = MockLLMProvider(['{"metadata": {"completed": false}}'])
        service = LLMInferenceService(llm, temperature=0.2, max_tokens=512)
        
        await run_extract(
            service,
            progress="found the name",
            previous_content={"name": "Widget"},
            chunks_seen=1,
            model_name="gpt-4o-mini",
        )
        
        call = llm.calls[0]
        system, user = call["messages"]
        assert system.role == MessageRole.SYSTEM
        assert '"price"' in system.content
        assert "product name and price" in user.content
        assert "found the name" in user.content
        assert '"name": "Widget"' in user.content
        assert "DOM chunk 2 of 2" in user.content
        assert call["model"] == "gpt-4o-mini"
        assert call["temperature"] == 0.2
        assert call["max_tokens"] == 512
        assert call["response_format"] == {"type": "json_object"}
    
    @pytest.mark.asyncio
    async def test_json_mode_off(self):
        llm = MockLLMProvider(['{"metadata": {"completed": false}}'])
        service = LLMInferenceService(llm, json_mode=False)
        
        await run_extract(service)
        
        assert "response_format" not in llm.calls[0]


class TestObserve:
    """Test the observe call."""
    
    @pytest.mark.asyncio
    async def test_returns_elements_in_order(self):
        llm = MockLLMProvider([json.dumps({"elements": [
            {"element_id": "4", "description": "Cart"},
            {"element_id": 7, "description": "Checkout"},
        ]})])
        service = LLMInferenceService(llm)
        
        result = await service.observe(instruction="cart", dom_elements="4:<a>Cart</a>")
        
        assert result == [
            {"element_id": "4", "description": "Cart"},
            {"element_id": "7", "description": "Checkout"},
        ]
    
    @pytest.mark.asyncio
    async def test_bare_list_accepted(self):
        llm = MockLLMProvider(['[{"element_id": "1", "description": "Go"}]'])
        service = LLMInferenceService(llm)
        
        result = await service.observe(instruction="go", dom_elements="1:<button>Go</button>")
        
        assert result == [{"element_id": "1", "description": "Go"}]
    
    @pytest.mark.asyncio
    async def test_image_attached(self):
        """Image bytes are sent base64-encoded on the user message."""
        llm = MockLLMProvider(['{"elements": []}'])
        service = LLMInferenceService(llm)
        
        await service.observe(instruction="go", dom_elements="n/a", image=b"png-bytes")
        
        user = llm.calls[0]["messages"][1]
        assert user.images is not None
        assert user.images[0].data == base64.b64encode(b"png-bytes").decode("ascii")
        assert user.images[0].media_type == "image/png"
    
    @pytest.mark.asyncio
    async def test_no_image_by_default(self):
        llm = MockLLMProvider(['{"elements": []}'])
        service = LLMInferenceService(llm)
        
        await service.observe(instruction="go", dom_elements="1:<a>x</a>")
        
        assert llm.calls[0]["messages"][1].images is None
    
    @pytest.mark.asyncio
    async def test_element_without_id_is_invalid(self):
        llm = MockLLMProvider(['{"elements": [{"description": "no id"}]}'])
        service = LLMInferenceService(llm)
        
        with pytest.raises(InvalidResponseError):
            await service.observe(instruction="go", dom_elements="")
