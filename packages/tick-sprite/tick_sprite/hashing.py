"""Stable hashing and serialization for deterministic selection."""
from __future__ import annotations

import json
from typing import Any


def hash_string(value: str) -> int:
    """32-bit signed ``h = h * 31 + c`` over UTF-16 code units.

    Unlike ``hash()``, the result is identical across processes and runs.
    """
    data = value.encode("utf-16-le")
    h = 0
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        h = (h * 31 + unit) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return h


def stable_json(value: Any) -> str:
    """Compact, key-sorted JSON. Non-JSON values are stringified.

    Mappings whose keys cannot be ordered against each other keep their
    insertion order.
    """
    try:
        return json.dumps(
            value, sort_keys=True, separators=(",", ":"), default=str
        )
    except TypeError:
        return json.dumps(value, separators=(",", ":"), default=str)


def pick_index(seed: str, size: int) -> int:
    """Deterministic index in ``range(size)`` for ``seed``."""
    return abs(hash_string(seed)) % size
