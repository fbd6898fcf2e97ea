"""Schema-guided binary encoder.

This module provides the encode() function that converts a dynamic value tree
to the binary format, walking the schema from its root declaration. Struct
fields are written in schema order regardless of the order of the input mapping.
"""

from __future__ import annotations

import logging
import math
import struct
from typing import Any, Dict, Optional

from ..config import DEFAULT_OPTIONS, CodecOptions
from ..exceptions import (
    EncodeError,
    FieldMissing,
    LengthMismatch,
    NumericOverflow,
    NumericPrecisionLoss,
    TypeMismatch,
    UnknownVariant,
    UnsupportedType,
)
from ..utils.sizing import fixed_size
from ..values import Value, ValueKind, kind_of
from .bytepack import BytePacker, shortest_f32
from .schema import (
    FLOAT_TYPES,
    INTEGER_TYPES,
    Array,
    Enum,
    Primitive,
    SchemaContainer,
    Sequence,
    Struct,
    Tuple,
    TupleStruct,
    is_unit,
)
from .schemaless import encode_schemaless

logger = logging.getLogger(__name__)


def encode(
    value: Value,
    schema: Optional[SchemaContainer] = None,
    options: Optional[CodecOptions] = None,
) -> bytes:
    """Encode a value tree to the binary format.

    Args:
        value: Parsed JSON-like value
        schema: Schema to follow; when None, the schema-less rules are used
        options: Codec options (depth limit)

    Returns:
        Encoded payload bytes (no schema header)

    Raises:
        EncodeError: If the value does not fit the schema (see the subclasses
            TypeMismatch, FieldMissing, UnknownVariant, LengthMismatch,
            NumericOverflow, NumericPrecisionLoss, UnsupportedType)

    Note:
        Each slot accepts one spelling, the one decode() returns: numbers for
        every numeric type, the bare name for a unit enum variant. A float slot
        only accepts numbers that decode unchanged; for f32 that is a number
        equal to the shortest decimal of its 32-bit form (0.1 is accepted,
        1/3 is not).

    Examples:
        ```python
        from schemabin import SchemaContainer, encode

        schema = SchemaContainer.model_validate({
            "root": "Msg",
            "declarations": {"Msg": {"kind": "struct", "fields": {"a": "u32", "b": "string"}}},
        })
        encode({"a": 7, "b": "hi"}, schema)
        # b'\\x07\\x00\\x00\\x00\\x02\\x00\\x00\\x00hi'
        ```
    """
    if schema is None:
        return encode_schemaless(value, options)

    options = options or DEFAULT_OPTIONS
    packer = BytePacker()
    _Encoder(schema, options.max_depth).encode_type(packer, schema.root, value, "$", 0)

    logger.debug("Encoded %s value to %d bytes", schema.root, len(packer))
    return packer.to_bytes()


class _Encoder:
    def __init__(self, schema: SchemaContainer, max_depth: int) -> None:
        self.schema = schema
        self.max_depth = max_depth
        self._sizes: Dict[str, Optional[int]] = {}

    def encode_type(
        self, packer: BytePacker, type_name: str, value: Any, path: str, depth: int
    ) -> None:
        if depth > self.max_depth:
            raise EncodeError(f"nesting deeper than {self.max_depth} levels", path)

        declaration = self.schema.lookup(type_name)
        if declaration is None:
            _encode_primitive(packer, type_name, value, path)
        else:
            self.encode_declaration(packer, declaration, value, path, depth)

    def encode_declaration(
        self, packer: BytePacker, declaration: Any, value: Any, path: str, depth: int
    ) -> None:
        kind = kind_of(value)

        if isinstance(declaration, Primitive):
            self.encode_type(packer, declaration.name, value, path, depth + 1)
            return

        if isinstance(declaration, Struct):
            if kind is not ValueKind.MAPPING:
                raise TypeMismatch(f"expected object, got {kind.value}", path)
            for field, type_name in declaration.fields:
                if field not in value:
                    raise FieldMissing(f"missing field {field!r}", path)
                self.encode_type(packer, type_name, value[field], f"{path}.{field}", depth + 1)
            return

        if isinstance(declaration, (TupleStruct, Tuple)):
            if isinstance(declaration, TupleStruct):
                members = declaration.fields
            else:
                members = declaration.elements
            items = _expect_sequence(value, kind, path)
            if len(items) != len(members):
                raise LengthMismatch(
                    f"expected {len(members)} elements, got {len(items)}", path
                )
            for index, (type_name, item) in enumerate(zip(members, items)):
                self.encode_type(packer, type_name, item, f"{path}[{index}]", depth + 1)
            return

        if isinstance(declaration, Sequence):
            items = _expect_sequence(value, kind, path)
            self._check_zero_sized(declaration.elements, len(items), path)
            packer.write_u32(len(items))
            for index, item in enumerate(items):
                self.encode_type(packer, declaration.elements, item, f"{path}[{index}]", depth + 1)
            return

        if isinstance(declaration, Array):
            items = _expect_sequence(value, kind, path)
            if len(items) != declaration.length:
                raise LengthMismatch(
                    f"expected array of length {declaration.length}, got {len(items)}", path
                )
            self._check_zero_sized(declaration.elements, len(items), path)
            for index, item in enumerate(items):
                self.encode_type(packer, declaration.elements, item, f"{path}[{index}]", depth + 1)
            return

        if isinstance(declaration, Enum):
            self.encode_enum(packer, declaration, value, kind, path, depth)
            return

        raise TypeError(f"Not a schema declaration: {type(declaration).__name__}")

    def encode_enum(
        self,
        packer: BytePacker,
        declaration: Enum,
        value: Any,
        kind: ValueKind,
        path: str,
        depth: int,
    ) -> None:
        names = declaration.variant_names()

        if kind is ValueKind.TEXT:
            if value not in names:
                raise UnknownVariant(f"unknown variant {value!r}, expected one of {names}", path)
            index = names.index(value)
            payload_declaration = declaration.variants[index][1]
            if not is_unit(payload_declaration):
                raise TypeMismatch(f"variant {value!r} requires a payload", path)
            packer.write_uint(index, 1)
            return

        if kind is not ValueKind.MAPPING:
            raise TypeMismatch(f"expected enum object or variant name, got {kind.value}", path)

        matches = [key for key in value if key in names]
        if len(value) != 1 or len(matches) != 1:
            raise UnknownVariant(
                f"expected exactly one variant key out of {names}, got {list(value)}", path
            )

        variant = matches[0]
        index = names.index(variant)
        payload_declaration = declaration.variants[index][1]
        payload = value[variant]

        if is_unit(payload_declaration):
            raise TypeMismatch(
                f"unit variant {variant!r} is written as its bare name, not an object", path
            )
        packer.write_uint(index, 1)
        self.encode_declaration(
            packer, payload_declaration, payload, f"{path}.{variant}", depth + 1
        )

    def _check_zero_sized(self, type_name: str, count: int, path: str) -> None:
        if not count:
            return
        if type_name not in self._sizes:
            self._sizes[type_name] = fixed_size(self.schema, type_name)
        if self._sizes[type_name] == 0:
            raise UnsupportedType(
                f"{count} elements of zero-sized type {type_name!r} cannot be encoded", path
            )


def _expect_sequence(value: Any, kind: ValueKind, path: str) -> Any:
    if kind is not ValueKind.SEQUENCE:
        raise TypeMismatch(f"expected array, got {kind.value}", path)
    return value


def _encode_primitive(packer: BytePacker, type_name: str, value: Any, path: str) -> None:
    """Encode a value as a built-in primitive.

    Raises:
        TypeMismatch: If the value's kind does not fit the primitive
        NumericOverflow: If a number is out of range for the primitive
        NumericPrecisionLoss: If a fractional number targets an integer, or a
            number would change when stored as a float
    """
    kind = kind_of(value)

    if type_name == "bool":
        if kind is not ValueKind.BOOL:
            raise TypeMismatch(f"expected bool, got {kind.value}", path)
        packer.write_bool(value)
        return

    if type_name == "string":
        if kind is not ValueKind.TEXT:
            raise TypeMismatch(f"expected string, got {kind.value}", path)
        packer.write_string(value)
        return

    if type_name in INTEGER_TYPES:
        num_bytes, signed = INTEGER_TYPES[type_name]
        integer = _to_integer(value, kind, type_name, path)
        bits = num_bytes * 8
        if signed:
            low, high = -(1 << (bits - 1)), (1 << (bits - 1)) - 1
        else:
            low, high = 0, (1 << bits) - 1
        if integer < low or integer > high:
            raise NumericOverflow(
                f"value {integer} out of range for {type_name} [{low}, {high}]", path
            )
        if signed:
            packer.write_int(integer, num_bytes)
        else:
            packer.write_uint(integer, num_bytes)
        return

    if type_name in FLOAT_TYPES:
        if kind is not ValueKind.NUMBER:
            raise TypeMismatch(f"expected number, got {kind.value}", path)
        num_bytes = FLOAT_TYPES[type_name]
        try:
            number = float(value)
            stored = shortest_f32(struct.pack("<f", number)) if num_bytes == 4 else number
        except OverflowError as err:
            raise NumericOverflow(f"value {value} out of range for {type_name}", path) from err
        if stored != value and not math.isnan(number):
            raise NumericPrecisionLoss(
                f"value {value} is not exactly representable as {type_name}", path
            )
        packer.write_float(number, num_bytes)
        return

    raise TypeMismatch(f"unknown primitive {type_name!r}", path)


def _to_integer(value: Any, kind: ValueKind, type_name: str, path: str) -> int:
    if kind is ValueKind.NUMBER:
        if isinstance(value, int):
            return value
        if math.isnan(value):
            raise NumericPrecisionLoss(f"NaN is not a valid {type_name}", path)
        if math.isinf(value):
            raise NumericOverflow(f"value {value} out of range for {type_name}", path)
        if not value.is_integer():
            raise NumericPrecisionLoss(
                f"value {value} has a fractional part, {type_name} requires an integer", path
            )
        return int(value)

    raise TypeMismatch(f"expected number, got {kind.value}", path)
