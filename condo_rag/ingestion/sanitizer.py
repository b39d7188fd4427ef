"""
Metadata Sanitization

The vector index only accepts flat metadata: strings, numbers, booleans and
arrays of strings. Every record passes through `sanitize_metadata` before
upsert.
"""

import json
from enum import Enum
from typing import Any, Dict, List, Union

from pydantic import BaseModel


MetadataValue = Union[str, int, float, bool, List[str]]


def _is_empty_object(value: Any) -> bool:
    if isinstance(value, BaseModel):
        return False
    return isinstance(value, (dict, list, tuple, set)) and len(value) == 0


def _to_plain(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, Enum):
        return value.value
    return value


def _array_item(item: Any) -> str:
    item = _to_plain(item)
    if isinstance(item, str):
        return item
    return json.dumps(item, default=str)


def sanitize_value(value: Any) -> Any:
    """
    Flatten one metadata value.

    Returns None when the value should be dropped.
    """
    value = _to_plain(value)

    if value is None or _is_empty_object(value):
        return None

    if isinstance(value, (list, tuple, set)):
        return [_array_item(item) for item in value]

    if isinstance(value, dict):
        return json.dumps(value, default=str)

    if isinstance(value, (str, bool, int, float)):
        return value

    return str(value)


def sanitize_metadata(metadata: Dict[str, Any]) -> Dict[str, MetadataValue]:
    """
    Flatten a metadata map for the vector index.

    Rules:
    - None values and empty objects/arrays are dropped
    - Non-array objects are serialised to JSON strings
    - Arrays become arrays of strings
    - Scalar str/int/float/bool values pass through

    Args:
        metadata: Arbitrary metadata map

    Returns:
        New map containing only scalar or string-array values
    """
    clean: Dict[str, MetadataValue] = {}
    for key, value in metadata.items():
        flat = sanitize_value(value)
        if flat is not None:
            clean[key] = flat
    return clean
