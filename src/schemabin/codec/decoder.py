"""Schema-guided binary decoder.

This module provides the decode() function that converts binary data back to
a dynamic value tree, reading the schema's declarations in the same order the
encoder wrote them.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from ..config import DEFAULT_OPTIONS, CodecOptions
from ..exceptions import (
    DecodeError,
    InvalidBool,
    InvalidDiscriminant,
    InvalidLength,
    InvalidUtf8,
    TrailingBytes,
    UnexpectedEof,
)
from ..utils.sizing import fixed_size
from ..values import Value
from .bytepack import ByteUnpacker, shortest_f32
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

logger = logging.getLogger(__name__)


def decode(
    data: bytes,
    schema: SchemaContainer,
    options: Optional[CodecOptions] = None,
) -> Value:
    """Decode binary data to a value tree.

    Args:
        data: Payload bytes (no schema header)
        schema: Schema the payload was encoded with
        options: Codec options (trailing-byte policy, depth limit)

    Returns:
        Decoded value. Structs become objects in schema field order, tuples and
        sequences become arrays, enums become ``{variant: payload}`` (or the bare
        variant name for unit variants).

    Raises:
        DecodeError: If data is truncated, corrupted, or doesn't match schema
            (see UnexpectedEof, InvalidDiscriminant, InvalidUtf8, InvalidBool,
            InvalidLength, TrailingBytes)

    Examples:
        ```python
        from schemabin import decode

        decode(b"\\x07\\x00\\x00\\x00\\x02\\x00\\x00\\x00hi", schema)
        # {'a': 7, 'b': 'hi'}
        ```
    """
    options = options or DEFAULT_OPTIONS
    unpacker = ByteUnpacker(data)
    value = _Decoder(schema, unpacker, options.max_depth).decode_type(schema.root, "$", 0)

    remaining = unpacker.bytes_remaining()
    if remaining:
        if options.strict_trailing:
            raise TrailingBytes(
                f"{remaining} bytes left after {schema.root} value at offset {unpacker.position()}"
            )
        logger.debug("Ignoring %d trailing bytes", remaining)

    logger.debug("Decoded %s value from %d bytes", schema.root, unpacker.position())
    return value


class _Decoder:
    def __init__(self, schema: SchemaContainer, unpacker: ByteUnpacker, max_depth: int) -> None:
        self.schema = schema
        self.unpacker = unpacker
        self.max_depth = max_depth
        self._sizes: Dict[str, Optional[int]] = {}

    def decode_type(self, type_name: str, path: str, depth: int) -> Any:
        if depth > self.max_depth:
            raise DecodeError(f"nesting deeper than {self.max_depth} levels", path)

        declaration = self.schema.lookup(type_name)
        if declaration is not None:
            return self.decode_declaration(declaration, path, depth)

        try:
            return self.decode_primitive(type_name, path)
        except UnexpectedEof as err:
            raise UnexpectedEof(f"truncated {type_name}: {err.reason}", path) from err

    def decode_declaration(self, declaration: Any, path: str, depth: int) -> Any:
        if isinstance(declaration, Primitive):
            return self.decode_type(declaration.name, path, depth + 1)

        if isinstance(declaration, Struct):
            result: Dict[str, Any] = {}
            for field, type_name in declaration.fields:
                result[field] = self.decode_type(type_name, f"{path}.{field}", depth + 1)
            return result

        if isinstance(declaration, (TupleStruct, Tuple)):
            if isinstance(declaration, TupleStruct):
                members = declaration.fields
            else:
                members = declaration.elements
            return [
                self.decode_type(type_name, f"{path}[{index}]", depth + 1)
                for index, type_name in enumerate(members)
            ]

        if isinstance(declaration, Sequence):
            count = self._read_prefix(path, "sequence count")
            if count and self._zero_sized(declaration.elements):
                raise InvalidLength(
                    f"sequence of {count} zero-sized {declaration.elements} elements", path
                )
            # Every other element type takes at least one byte
            if count > self.unpacker.bytes_remaining():
                raise UnexpectedEof(
                    f"sequence of {count} elements but only "
                    f"{self.unpacker.bytes_remaining()} bytes remain",
                    path,
                )
            return self._decode_items(declaration.elements, count, path, depth)

        if isinstance(declaration, Array):
            if declaration.length and self._zero_sized(declaration.elements):
                raise InvalidLength(
                    f"array of {declaration.length} zero-sized {declaration.elements} elements",
                    path,
                )
            return self._decode_items(declaration.elements, declaration.length, path, depth)

        if isinstance(declaration, Enum):
            return self.decode_enum(declaration, path, depth)

        raise TypeError(f"Not a schema declaration: {type(declaration).__name__}")

    def decode_enum(self, declaration: Enum, path: str, depth: int) -> Any:
        try:
            index = self.unpacker.read_byte()
        except UnexpectedEof as err:
            raise UnexpectedEof(f"truncated enum discriminant: {err.reason}", path) from err

        if index >= len(declaration.variants):
            raise InvalidDiscriminant(
                f"discriminant {index} out of range for {len(declaration.variants)} variants",
                path,
            )

        variant, payload_declaration = declaration.variants[index]
        if is_unit(payload_declaration):
            return variant
        payload = self.decode_declaration(payload_declaration, f"{path}.{variant}", depth + 1)
        return {variant: payload}

    def decode_primitive(self, type_name: str, path: str) -> Any:
        unpacker = self.unpacker

        if type_name == "bool":
            raw = unpacker.read_bool()
            if raw > 1:
                raise InvalidBool(f"invalid bool byte {raw:#04x}", path)
            return raw == 1

        if type_name == "string":
            raw_bytes = unpacker.read_string_bytes()
            try:
                return raw_bytes.decode("utf-8")
            except UnicodeDecodeError as err:
                raise InvalidUtf8(f"invalid UTF-8 encoding: {err}", path) from err

        if type_name in INTEGER_TYPES:
            num_bytes, signed = INTEGER_TYPES[type_name]
            if signed:
                return unpacker.read_int(num_bytes)
            return unpacker.read_uint(num_bytes)

        if type_name in FLOAT_TYPES:
            if FLOAT_TYPES[type_name] == 4:
                return shortest_f32(unpacker.read_bytes(4))
            return unpacker.read_float(8)

        raise DecodeError(f"unknown primitive {type_name!r}", path)

    def _read_prefix(self, path: str, what: str) -> int:
        try:
            return self.unpacker.read_u32()
        except UnexpectedEof as err:
            raise UnexpectedEof(f"truncated {what}: {err.reason}", path) from err

    def _decode_items(self, type_name: str, count: int, path: str, depth: int) -> List[Any]:
        return [
            self.decode_type(type_name, f"{path}[{index}]", depth + 1) for index in range(count)
        ]

    def _zero_sized(self, type_name: str) -> bool:
        if type_name not in self._sizes:
            self._sizes[type_name] = fixed_size(self.schema, type_name)
        return self._sizes[type_name] == 0
