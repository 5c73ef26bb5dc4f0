"""
Stable hashing of JSON-like values.

Used to derive cache keys for extraction requests so the same pasted text
sent to the same model maps to the same cache entry across processes.
"""

import hashlib
import json
from dataclasses import asdict, is_dataclass
from typing import Any


def hash(obj: Any) -> str:
    """
    Return a hex SHA-256 digest of an object or list of objects.

    Objects are serialized to JSON with sorted keys before hashing so dict
    ordering never changes the result. Dataclasses are hashed by their
    field values.

    Args:
        obj: Any JSON-serializable object, dataclass, or list of them.

    Returns:
        Hexadecimal digest string.
    """
    json_str = json.dumps(obj, sort_keys=True, default=_default_serializer)
    return hashlib.sha256(json_str.encode("utf-8")).hexdigest()


def _default_serializer(obj: Any) -> Any:
    """Fallback encoder for values json does not handle natively."""
    if is_dataclass(obj) and not isinstance(obj, type):
        return asdict(obj)
    return str(obj)
