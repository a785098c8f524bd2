"""
Observation Store - Record of past observations for one session.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

from llm_web_extract.inference.schemas import ObservedElement
from llm_web_extract.utils.ids import generate_id


@dataclass
class Observation:
    """
    A recorded observation.
    
    Attributes:
        id: Deterministic id derived from the instruction
        instruction: Instruction the observation answered
        result: Resolved elements, in model order
    """
    id: str
    instruction: str
    result: List[ObservedElement] = field(default_factory=list)


class ObservationStore:
    """
    In-memory observations keyed by instruction-derived id.
    
    Recording the same instruction again overwrites the earlier entry.
    Not synchronized: use from a single event loop.
    
    Example:
        >>> store = ObservationStore()
        >>> obs_id = store.record("find the login button", elements)
        >>> store.get(obs_id).instruction
        'find the login button'
    """
    
    def __init__(self):
        self._observations: Dict[str, Observation] = {}
    
    def record(self, instruction: str, result: List[ObservedElement]) -> str:
        """Store an observation and return its id."""
        observation_id = generate_id(instruction)
        self._observations[observation_id] = Observation(
            id=observation_id,
            instruction=instruction,
            result=list(result),
        )
        return observation_id
    
    def get(self, observation_id: str) -> Optional[Observation]:
        return self._observations.get(observation_id)
    
    def items(self) -> Iterator[Tuple[str, Observation]]:
        return iter(list(self._observations.items()))
    
    def clear(self) -> None:
        self._observations.clear()
    
    def __len__(self) -> int:
        return len(self._observations)
    
    def __contains__(self, observation_id: object) -> bool:
        return observation_id in self._observations
