"""
Schemas - Structured output definitions for LLM responses.

Uses Pydantic for validation. Extraction responses are validated against a
"partial" variant of the caller's schema, so a round may leave fields out.
"""

import json
from functools import lru_cache
from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel, ConfigDict, Field, create_model, field_validator


class ExtractionMetadata(BaseModel):
    """Per-round extraction status reported by the model."""
    progress: str = ""
    completed: bool = False


class ObservedElement(BaseModel):
    """An element found by observation, with a resolved locator."""
    selector: str
    description: str


class ObserveElementResult(BaseModel):
    """One element as returned by the model, before locator resolution."""
    element_id: str
    description: str = ""
    
    model_config = ConfigDict(extra="allow")
    
    @field_validator("element_id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class ObserveResponse(BaseModel):
    """Complete observation response from the model."""
    elements: List[ObserveElementResult] = Field(default_factory=list)


@lru_cache(maxsize=128)
def partial_extraction_model(schema: Type[BaseModel]) -> Type[BaseModel]:
    """
    Build a model accepting any subset of schema's fields plus the required
    metadata block. Recently used schemas are cached.    """
    fields: Dict[str, Any] = {
        name: (Optional[info.annotation], None)
        for name, info in schema.model_fields.items()
        if name != "metadata"
    }
    fields["metadata"] = (ExtractionMetadata, ...)
    return create_model(f"Partial{schema.__name__}", **fields)


def parse_json_text(text: str) -> Any:
    """
    Parse JSON out of an LLM reply, tolerating markdown code fences.
    
    Raises:
        json.JSONDecodeError: If no valid JSON is present
    """
    json_text = text.strip()
    if "```json" in json_text:
        start = json_text.find("```json") + 7
        end = json_text.find("```", start)
        json_text = json_text[start:end].strip()
    elif "```" in json_text:
        start = json_text.find("```") + 3
        end = json_text.find("```", start)
        json_text = json_text[start:end].strip()
    return json.loads(json_text)
