"""Text-column serialization for list-valued transaction fields."""

import json
import logging
from typing import Optional, Sequence

logger = logging.getLogger(__name__)


def encode_string_list(values: Optional[Sequence[str]]) -> str:
    """Serialize an ordered list of strings as a JSON array.

    Best effort: anything that cannot be serialized is stored as an empty
    array instead of failing the write.
    """
    if not values:
        return "[]"
    try:
        return json.dumps([str(v) for v in values])
    except (TypeError, ValueError) as e:
        logger.warning(f"Could not serialize list value, storing empty list: {e}")
        return "[]"


def decode_string_list(text: Optional[str]) -> list[str]:
    """Deserialize a JSON array column. Malformed or missing data yields []."""
    if not text:
        return []
    try:
        data = json.loads(text)
    except (TypeError, ValueError):
        logger.debug(f"Ignoring malformed list column: {text!r}")
        return []
    if not isinstance(data, list):
        return []
    return [str(item) for item in data if item is not None]
