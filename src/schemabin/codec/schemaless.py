"""Schema-less binary encoder.

Without a schema the encoder infers a layout from the value itself:

- bool: 1 byte
- integral number within i64: 8-byte signed integer
- any other number: 8-byte IEEE-754 double
- string: u32 length + UTF-8
- array: u32 count + elements (elements may differ in type)
- object: member values in insertion order, names dropped
- null: not representable

The output is one-way. Nothing records which layout was chosen, so there is
no matching decoder, and objects with the same members in a different order
encode differently.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from ..config import DEFAULT_OPTIONS, CodecOptions
from ..exceptions import EncodeError, NumericOverflow, UnsupportedType
from ..values import Value, ValueKind, kind_of
from .bytepack import BytePacker

logger = logging.getLogger(__name__)

_I64_MIN = -(1 << 63)
_I64_MAX = (1 << 63) - 1


def encode_schemaless(value: Value, options: Optional[CodecOptions] = None) -> bytes:
    """Encode a value tree by structural inference.

    Args:
        value: Parsed JSON-like value
        options: Codec options (depth limit)

    Returns:
        Encoded bytes

    Raises:
        UnsupportedType: If the tree contains null
        NumericOverflow: If a number cannot be represented as a double

    Example:
        >>> encode_schemaless({"definitely_pi": 2.718281828459045, "trustworthy": False})
        b'iW\\x14\\x8b\\n\\xbf\\x05@\\x00'
    """
    options = options or DEFAULT_OPTIONS
    packer = BytePacker()
    _encode(packer, value, "$", 0, options.max_depth)

    logger.debug("Encoded value without schema to %d bytes", len(packer))
    return packer.to_bytes()


def _encode(packer: BytePacker, value: Any, path: str, depth: int, max_depth: int) -> None:
    if depth > max_depth:
        raise EncodeError(f"nesting deeper than {max_depth} levels", path)

    kind = kind_of(value)

    if kind is ValueKind.NULL:
        raise UnsupportedType("null has no representation without a schema", path)

    if kind is ValueKind.BOOL:
        packer.write_bool(value)
    elif kind is ValueKind.NUMBER:
        if _is_integral(value) and _I64_MIN <= value <= _I64_MAX:
            packer.write_int(int(value), 8)
        else:
            try:
                packer.write_float(float(value), 8)
            except OverflowError as err:
                raise NumericOverflow(f"value {value} out of range for f64", path) from err
    elif kind is ValueKind.TEXT:
        packer.write_string(value)
    elif kind is ValueKind.SEQUENCE:
        packer.write_u32(len(value))
        for index, item in enumerate(value):
            _encode(packer, item, f"{path}[{index}]", depth + 1, max_depth)
    else:
        for key, item in value.items():
            _encode(packer, item, f"{path}.{key}", depth + 1, max_depth)


def _is_integral(number: Any) -> bool:
    if isinstance(number, int):
        return True
    return number.is_integer()
