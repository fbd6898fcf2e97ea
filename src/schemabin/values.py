"""Dynamic value model.

Parsed JSON text is held as plain Python objects: ``None``, ``bool``, ``int``,
``float``, ``str``, ``list`` and ``dict`` (dicts keep insertion order). Every
traversal dispatches on :func:`kind_of`, which maps those objects onto a single
discriminant so ``bool`` is never confused with a number.
"""

from __future__ import annotations

import enum
import json
import math
from typing import Any, Dict, List, Union

Value = Union[None, bool, int, float, str, List["Value"], Dict[str, "Value"]]


class ValueKind(enum.Enum):
    """Discriminant of a :data:`Value` node."""

    NULL = "null"
    BOOL = "bool"
    NUMBER = "number"
    TEXT = "text"
    SEQUENCE = "sequence"
    MAPPING = "mapping"


def kind_of(value: Any) -> ValueKind:
    """Classify a value node.

    Raises:
        TypeError: If ``value`` is not a JSON-like object
    """
    if value is None:
        return ValueKind.NULL
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return ValueKind.BOOL
    if isinstance(value, (int, float)):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.TEXT
    if isinstance(value, (list, tuple)):
        return ValueKind.SEQUENCE
    if isinstance(value, dict):
        return ValueKind.MAPPING
    raise TypeError(f"Not a JSON-like value: {type(value).__name__}")


def parse_value(text: str | bytes) -> Value:
    """Parse JSON text into a value tree.

    Raises:
        ValueError: If the text is not valid JSON
    """
    return json.loads(text)


def render_value(value: Value, pretty: bool = False) -> str:
    """Serialize a value tree to JSON text."""
    if pretty:
        return json.dumps(value, indent=2, ensure_ascii=False)
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def values_equal(left: Any, right: Any) -> bool:
    """Structural equality of two value trees.

    Numbers compare by value (``7 == 7.0``) but booleans never equal numbers.
    Mapping comparison ignores key order.
    """
    left_kind = kind_of(left)
    if left_kind is not kind_of(right):
        return False

    if left_kind is ValueKind.NUMBER:
        if isinstance(left, float) and isinstance(right, float):
            if math.isnan(left) and math.isnan(right):
                return True
        return bool(left == right)

    if left_kind is ValueKind.SEQUENCE:
        return len(left) == len(right) and all(
            values_equal(a, b) for a, b in zip(left, right)
        )

    if left_kind is ValueKind.MAPPING:
        if left.keys() != right.keys():
            return False
        return all(values_equal(left[key], right[key]) for key in left)

    return bool(left == right)
