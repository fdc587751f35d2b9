"""Dot-path lookup over nested mappings."""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from tick_condition.types import MISSING


def read_path(subject: Any, path: str) -> Any:
    """Walk ``path`` segment by segment through nested mappings.

    Returns MISSING when a segment is absent or when the walk reaches a
    value that is not a mapping (sequences are not indexed). A stored
    ``None`` is returned as ``None``.
    """
    current = subject
    for segment in path.split("."):
        if not isinstance(current, Mapping):
            return MISSING
        if segment not in current:
            return MISSING
        current = current[segment]
    return current
