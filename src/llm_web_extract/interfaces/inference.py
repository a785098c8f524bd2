"""
Inference Interface - One-shot extract and observe calls.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel


class IInferenceService(ABC):
    """
    Language-model inference used by the handlers.
    
    ``extract`` returns the schema fields plus a ``metadata`` mapping with
    ``progress`` and ``completed``. ``observe`` returns a list of mappings
    with ``element_id`` and ``description``.
    """

    @abstractmethod
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
        ...

    @abstractmethod
    async def observe(
        self,
        instruction: str,
        dom_elements: str,
        model_name: Optional[str] = None,
        image: Optional[bytes] = None,
        request_id: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        ...
