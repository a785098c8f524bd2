"""
Inference Service - Extract and observe calls on top of an LLM provider.

This is the single point of contact between the handlers and the model:
it builds prompts, calls the provider, and turns the reply into validated
Python data. Parse and validation problems surface as InvalidResponseError;
provider failures propagate as raised.
"""

import base64
import json
import logging
from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel, ValidationError

from llm_web_extract.exceptions import InvalidResponseError
from llm_web_extract.inference.prompts import PromptBuilder
from llm_web_extract.inference.schemas import (
    ObserveResponse,
    parse_json_text,
    partial_extraction_model,
)
from llm_web_extract.interfaces.inference import IInferenceService
from llm_web_extract.interfaces.llm import ILLMProvider, ImageContent, Message

logger = logging.getLogger(__name__)


class LLMInferenceService(IInferenceService):
    """
    Prompted JSON inference for the extraction and observation handlers.
    
    Example:
        >>> service = LLMInferenceService(OpenAIProvider(base_url=..., model="gpt-4o"))
        >>> response = await service.extract(
        ...     instruction="the article title",
        ...     progress="",
        ...     previous_content={},
        ...     dom_elements="0:<h1>Hello</h1>",
        ...     schema=Article,
        ...     chunks_seen=0,
        ...     chunks_total=1,
        ... )
        >>> response["metadata"]["completed"]
        True
    """
    
    def __init__(
        self,
        llm_provider: ILLMProvider,
        temperature: float = 0.1,
        max_tokens: Optional[int] = None,
        json_mode: bool = True,
    ):
        """
        Args:
            llm_provider: Chat-completion backend
            temperature: Sampling temperature for every call
            max_tokens: Optional completion token cap
            json_mode: Ask the backend for a JSON object response
        """
        self._llm = llm_provider
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._json_mode = json_mode
        self._prompt_builder = PromptBuilder()
    
    async def _call(
        self,
        system: str,
        user: str,
        model_name: Optional[str],
        request_id: Optional[str],
        images: Optional[List[ImageContent]] = None,
    ) -> Any:
        extra: Dict[str, Any] = {}
        if self._json_mode:
            extra["response_format"] = {"type": "json_object"}
        
        logger.debug(f"Inference request {request_id or '-'} on {model_name or self._llm.default_model}")
        response = await self._llm.complete(
            [Message.system(system), Message.user(user, images=images)],
            model=model_name,
            temperature=self._temperature,
            max_tokens=self._max_tokens,
            **extra,
        )
        
        if not response.content or not response.content.strip():
            raise InvalidResponseError("Empty response", raw_response=response.content)
        try:
            return parse_json_text(response.content)
        except json.JSONDecodeError as e:
            raise InvalidResponseError(f"JSON parse error: {e}", raw_response=response.content) from e
    
    async def extract(
        self,
        instruction: str,
        progress: str,
        previous_content: Dict[str, Any],
        dom_elements: str,
        schema: Type[BaseModel],
        chunks_seen: int,
        chunks_total: int,
        model_name: Optional[str] = None,
        request_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Extract schema fields from one DOM chunk.
        
        Returns:
            Fields the model reported, plus "metadata" with progress/completed
        """
        system, user = self._prompt_builder.build_extract(
            instruction=instruction,
            progress=progress,
            previous_content=previous_content,
            dom_elements=dom_elements,
            schema=schema.model_json_schema(),
            chunks_seen=chunks_seen,
            chunks_total=chunks_total,
        )
        data = await self._call(system, user, model_name, request_id)
        if not isinstance(data, dict):
            raise InvalidResponseError("Extraction response is not an object", raw_response=json.dumps(data))
        
        partial_model = partial_extraction_model(schema)
        try:
            validated = partial_model.model_validate(data)
        except ValidationError as e:
            raise InvalidResponseError(f"Validation error: {e}", raw_response=json.dumps(data)) from e
        
        present = validated.model_fields_set - {"metadata"}
        result = validated.model_dump(include=present)
        result["metadata"] = validated.metadata.model_dump()
        return result
    
    async def observe(
        self,
        instruction: str,
        dom_elements: str,
        model_name: Optional[str] = None,
        image: Optional[bytes] = None,
        request_id: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """
        Find elements matching an instruction.
        
        Returns:
            Elements in the model's order, each with element_id and description
        """
        system, user = self._prompt_builder.build_observe(instruction, dom_elements)
        images = None
        if image is not None:
            images = [ImageContent(data=base64.b64encode(image).decode("ascii"))]
        
        data = await self._call(system, user, model_name, request_id, images=images)
        if isinstance(data, list):
            data = {"elements": data}
        try:
            parsed = ObserveResponse.model_validate(data)
        except ValidationError as e:
            raise InvalidResponseError(f"Validation error: {e}", raw_response=json.dumps(data)) from e
        
        return [element.model_dump() for element in parsed.elements]
