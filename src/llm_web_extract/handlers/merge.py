"""
Partial-result merging across extraction rounds.

Each field of the target schema is either overwritten by the newest round
(the default) or accumulated. Mark a list field as accumulating with
``accumulating_field()`` or ``json_schema_extra={"merge": "accumulate"}``.
"""

from typing import Any, Dict, List, Type

from pydantic import BaseModel, Field
from pydantic.fields import FieldInfo

OVERWRITE = "overwrite"
ACCUMULATE = "accumulate"


def accumulating_field(**kwargs: Any) -> Any:
    """A list field whose items are collected across rounds."""
    kwargs.setdefault("default_factory", list)
    return Field(json_schema_extra={"merge": ACCUMULATE}, **kwargs)


def merge_strategy(info: FieldInfo) -> str:
    extra = info.json_schema_extra
    if isinstance(extra, dict):
        return str(extra.get("merge", OVERWRITE))
    return OVERWRITE


def _dedupe(items: List[Any]) -> List[Any]:
    unique: List[Any] = []
    for item in items:
        if item not in unique:
            unique.append(item)
    return unique


def merge_partial(
    schema: Type[BaseModel],
    previous: Dict[str, Any],
    update: Dict[str, Any],
) -> Dict[str, Any]:
    """
    Merge one round's payload into the content extracted so far.
    
    - fields absent from ``update`` or null in it keep their previous value,
      or are left unset so the schema default applies
    - an empty string keeps an existing value
    - accumulating list fields are concatenated, dropping repeated items
    - every other field is replaced
    - the ``metadata`` key is never merged
    
    Neither input is modified.
    """
    merged = dict(previous)
    for name, value in update.items():
        if name == "metadata":
            continue
        if value is None:
            continue
        # "" means nothing new, but still counts as a value for an unset field
        if isinstance(value, str) and not value.strip() and name in merged:
            continue
        
        info = schema.model_fields.get(name)
        prior = merged.get(name)
        if (
            info is not None
            and merge_strategy(info) == ACCUMULATE
            and isinstance(value, list)
            and isinstance(prior, list)
        ):
            merged[name] = _dedupe(prior + value)
        else:
            merged[name] = value
    return merged
