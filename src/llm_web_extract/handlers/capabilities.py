"""
Model Capabilities - Which models accept which kinds of input.
"""

from typing import TYPE_CHECKING, Dict, FrozenSet, Iterable, Mapping, Optional

if TYPE_CHECKING:
    from llm_web_extract.config.settings import Settings

VISION = "vision"


class ModelCapabilities:
    """
    Lookup from model id to its capability set.
    
    Example:
        >>> caps = ModelCapabilities.with_vision(["gpt-4o"])
        >>> caps.supports("gpt-4o", VISION)
        True
        >>> caps.supports("gpt-3.5-turbo", VISION)
        False
    """
    
    def __init__(self, capabilities: Optional[Mapping[str, Iterable[str]]] = None):
        self._capabilities: Dict[str, FrozenSet[str]] = {
            model: frozenset(caps) for model, caps in (capabilities or {}).items()
        }
    
    @classmethod
    def with_vision(cls, models: Iterable[str]) -> "ModelCapabilities":
        return cls({model: {VISION} for model in models})
    
    @classmethod
    def from_settings(cls, settings: "Settings") -> "ModelCapabilities":
        return cls.with_vision(settings.extract.vision_models)
    
    def capabilities_of(self, model: Optional[str]) -> FrozenSet[str]:
        if model is None:
            return frozenset()
        return self._capabilities.get(model, frozenset())
    
    def supports(self, model: Optional[str], capability: str) -> bool:
        return capability in self.capabilities_of(model)
