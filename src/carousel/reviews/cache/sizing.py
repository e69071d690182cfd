from __future__ import annotations

import json
import logging
import sys
from typing import Any

from pydantic import BaseModel

logger = logging.getLogger(__name__)

# bytes per character when the value cannot be serialized
FALLBACK_BYTES_PER_CHAR = 2


def _serialize(value: Any) -> str:
    if isinstance(value, BaseModel):
        return value.model_dump_json()
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def estimate_size(value: Any) -> int:
    """Best-effort footprint of `value` in bytes.

    Uses the UTF-8 length of the JSON encoding. Values that cannot be encoded
    (cycles, arbitrary objects) fall back to a rough estimate over `str(value)`.
    """
    try:
        return len(_serialize(value).encode("utf-8"))
    except (TypeError, ValueError, RecursionError) as e:
        logger.debug("Size estimation fell back to str() for %s: %s", type(value), e)

    try:
        return len(str(value)) * FALLBACK_BYTES_PER_CHAR
    except Exception:
        logger.warning("Could not stringify %s for size estimation", type(value))
        return sys.getsizeof(value)
