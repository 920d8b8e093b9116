"""
Reactive Engine - Structural Value Comparison

Deep equality over the closed set of JSON value kinds that snapshots hold:
null, boolean, number, string, ordered sequence, keyed mapping.

Rules:
- null and absent are equal (a mapping key holding None matches a missing key)
- int and float compare by numeric value (1 == 1.0)
- booleans are their own kind and never equal a number
- sequences compare element by element, in order
- mappings compare key by key, ignoring key order
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Any


class ValueKind(str, Enum):
    NULL = "null"
    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    SEQUENCE = "sequence"
    MAPPING = "mapping"


def kind_of(value: Any) -> ValueKind:
    """Classify a snapshot value. Raises TypeError outside the closed set."""
    if value is None:
        return ValueKind.NULL
    # bool before number: bool is an int subclass
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, (int, float)):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, Mapping):
        return ValueKind.MAPPING
    if isinstance(value, Sequence):
        return ValueKind.SEQUENCE
    raise TypeError(f"Unsupported snapshot value: {type(value).__name__}")


def is_empty_structure(value: Any) -> bool:
    """True for [] and {}. Scalars are not structures."""
    kind = kind_of(value)
    return kind in (ValueKind.SEQUENCE, ValueKind.MAPPING) and len(value) == 0


def deep_equal(left: Any, right: Any) -> bool:
    left_kind = kind_of(left)
    right_kind = kind_of(right)
    if left_kind is not right_kind:
        return False
    return _VISITORS[left_kind](left, right)


def _equal_null(left: None, right: None) -> bool:
    return True


def _equal_scalar(left: Any, right: Any) -> bool:
    return left == right


def _equal_sequence(left: Sequence[Any], right: Sequence[Any]) -> bool:
    if len(left) != len(right):
        return False
    return all(deep_equal(a, b) for a, b in zip(left, right))


def _equal_mapping(left: Mapping[str, Any], right: Mapping[str, Any]) -> bool:
    for key in left.keys() | right.keys():
        if not deep_equal(left.get(key), right.get(key)):
            return False
    return True


_VISITORS = {
    ValueKind.NULL: _equal_null,
    ValueKind.BOOLEAN: _equal_scalar,
    ValueKind.NUMBER: _equal_scalar,
    ValueKind.STRING: _equal_scalar,
    ValueKind.SEQUENCE: _equal_sequence,
    ValueKind.MAPPING: _equal_mapping,
}
