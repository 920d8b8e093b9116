"""
Reactive Engine - Diff

(original snapshot, current snapshot) -> changed top-level fields.

Pure function: no IO, no hidden state, inputs are never mutated.
The key universe is the current snapshot; a field that disappeared is never
reported. Values in the result are the current snapshot's values.
"""

from __future__ import annotations

from typing import Any

from engine.reactive.types import Snapshot
from engine.reactive.values import deep_equal, is_empty_structure


def diff(original: Snapshot, current: Snapshot) -> dict[str, Any]:
    """
    Return only the fields of `current` whose value differs from `original`.

    A field that was null or absent before and is now an empty list or empty
    mapping is skipped: empty-to-empty is not a change worth sending.
    """
    changes: dict[str, Any] = {}

    for key, value in current.items():
        orig = original.get(key)

        if orig is None and is_empty_structure(value):
            continue

        if not deep_equal(orig, value):
            changes[key] = value

    return changes
