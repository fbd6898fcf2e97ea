"""Binary encoding of schemas.

A schema is written with the same primitive rules it describes:

    u32 count
    count x (string name, declaration)    # ascending name order
    string root

Each declaration starts with a one-byte discriminant:

    0 Array        string elements, u32 length
    1 Sequence     string elements
    2 Tuple        u32 n, n x string
    3 Enum         u32 n, n x (string variant, declaration)
    4 Struct       u32 n, n x (string field, string type)
    5 TupleStruct  u32 n, n x string
    6 Primitive    string name

The encoding is self-terminating: its counts bound its own length, which is what
lets a schema travel as an undelimited header in front of a payload.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List

from ..exceptions import SchemaCorrupt, UnexpectedEof
from .bytepack import BytePacker, ByteUnpacker
from .schema import Array, Enum, Primitive, SchemaContainer, Sequence, Struct, Tuple, TupleStruct

logger = logging.getLogger(__name__)

ARRAY = 0
SEQUENCE = 1
TUPLE = 2
ENUM = 3
STRUCT = 4
TUPLE_STRUCT = 5
PRIMITIVE = 6

# Nested enum payload declarations deeper than this are rejected as corrupt.
MAX_NESTING = 64

# Smallest possible encoding of one list item, for rejecting absurd counts early.
_STRING_MIN = 4
_DECLARATION_MIN = 1 + _STRING_MIN


def encode_schema(schema: SchemaContainer) -> bytes:
    """Encode a schema container to bytes.

    Args:
        schema: Validated schema container

    Returns:
        Self-terminating schema bytes
    """
    packer = BytePacker()
    names = sorted(schema.declarations)
    packer.write_u32(len(names))
    for name in names:
        packer.write_string(name)
        _encode_declaration(packer, schema.declarations[name])
    packer.write_string(schema.root)

    logger.debug("Encoded schema with %d declarations (%d bytes)", len(names), len(packer))
    return packer.to_bytes()


def _encode_declaration(packer: BytePacker, declaration: Any) -> None:
    if isinstance(declaration, Array):
        packer.write_uint(ARRAY, 1)
        packer.write_string(declaration.elements)
        packer.write_u32(declaration.length)
    elif isinstance(declaration, Sequence):
        packer.write_uint(SEQUENCE, 1)
        packer.write_string(declaration.elements)
    elif isinstance(declaration, Tuple):
        packer.write_uint(TUPLE, 1)
        _write_names(packer, declaration.elements)
    elif isinstance(declaration, Enum):
        packer.write_uint(ENUM, 1)
        packer.write_u32(len(declaration.variants))
        for variant, payload in declaration.variants:
            packer.write_string(variant)
            _encode_declaration(packer, payload)
    elif isinstance(declaration, Struct):
        packer.write_uint(STRUCT, 1)
        packer.write_u32(len(declaration.fields))
        for field, type_name in declaration.fields:
            packer.write_string(field)
            packer.write_string(type_name)
    elif isinstance(declaration, TupleStruct):
        packer.write_uint(TUPLE_STRUCT, 1)
        _write_names(packer, declaration.fields)
    elif isinstance(declaration, Primitive):
        packer.write_uint(PRIMITIVE, 1)
        packer.write_string(declaration.name)
    else:
        raise TypeError(f"Not a schema declaration: {type(declaration).__name__}")


def _write_names(packer: BytePacker, names: List[str]) -> None:
    packer.write_u32(len(names))
    for name in names:
        packer.write_string(name)


def decode_schema(data: bytes, offset: int = 0) -> tuple[SchemaContainer, int]:
    """Decode a schema container from the start of ``data``.

    Bytes after the schema are left untouched; the caller learns where the
    schema ended from the returned byte count.

    Args:
        data: Buffer holding schema bytes, possibly followed by anything
        offset: Position of the first schema byte

    Returns:
        Tuple of (schema, number of bytes consumed)

    Raises:
        SchemaCorrupt: If the bytes are truncated or structurally invalid
        UnresolvedTypeReference: If a referenced type is not declared
        UnboundedRecursion: If a declaration can never terminate
    """
    unpacker = ByteUnpacker(data, offset)
    try:
        count = _read_count(unpacker, _STRING_MIN + _DECLARATION_MIN)
        declarations: Dict[str, Any] = {}
        for _ in range(count):
            name = _read_name(unpacker)
            if name in declarations:
                raise SchemaCorrupt(f"Duplicate declaration {name!r}")
            declarations[name] = _decode_declaration(unpacker, 0)
        root = _read_name(unpacker)
    except UnexpectedEof as err:
        raise SchemaCorrupt(f"Truncated schema: {err.reason}") from err

    consumed = unpacker.position() - offset
    # References are resolved here, after the whole schema is read.
    schema = SchemaContainer(declarations=declarations, root=root)
    logger.debug("Decoded schema with %d declarations (%d bytes)", count, consumed)
    return schema, consumed


def _read_count(unpacker: ByteUnpacker, item_size: int) -> int:
    count = unpacker.read_u32()
    if count * item_size > unpacker.bytes_remaining():
        raise SchemaCorrupt(
            f"Count {count} at offset {unpacker.position() - 4} exceeds remaining "
            f"{unpacker.bytes_remaining()} bytes"
        )
    return count


def _read_name(unpacker: ByteUnpacker) -> str:
    raw = unpacker.read_string_bytes()
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as err:
        raise SchemaCorrupt(f"Type name is not valid UTF-8: {raw!r}") from err


def _read_names(unpacker: ByteUnpacker) -> List[str]:
    count = _read_count(unpacker, _STRING_MIN)
    return [_read_name(unpacker) for _ in range(count)]


def _decode_array(unpacker: ByteUnpacker, depth: int) -> Array:
    elements = _read_name(unpacker)
    return Array(elements=elements, length=unpacker.read_u32())


def _decode_sequence(unpacker: ByteUnpacker, depth: int) -> Sequence:
    return Sequence(elements=_read_name(unpacker))


def _decode_tuple(unpacker: ByteUnpacker, depth: int) -> Tuple:
    return Tuple(elements=_read_names(unpacker))


def _decode_enum(unpacker: ByteUnpacker, depth: int) -> Enum:
    count = _read_count(unpacker, _STRING_MIN + _DECLARATION_MIN)
    variants = []
    for _ in range(count):
        variant = _read_name(unpacker)
        variants.append((variant, _decode_declaration(unpacker, depth + 1)))
    return Enum(variants=variants)


def _decode_struct(unpacker: ByteUnpacker, depth: int) -> Struct:
    count = _read_count(unpacker, 2 * _STRING_MIN)
    fields = []
    for _ in range(count):
        field = _read_name(unpacker)
        fields.append((field, _read_name(unpacker)))
    return Struct(fields=fields)


def _decode_tuple_struct(unpacker: ByteUnpacker, depth: int) -> TupleStruct:
    return TupleStruct(fields=_read_names(unpacker))


def _decode_primitive(unpacker: ByteUnpacker, depth: int) -> Primitive:
    return Primitive(name=_read_name(unpacker))


_DECODERS: Dict[int, Callable[[ByteUnpacker, int], Any]] = {
    ARRAY: _decode_array,
    SEQUENCE: _decode_sequence,
    TUPLE: _decode_tuple,
    ENUM: _decode_enum,
    STRUCT: _decode_struct,
    TUPLE_STRUCT: _decode_tuple_struct,
    PRIMITIVE: _decode_primitive,
}


def _decode_declaration(unpacker: ByteUnpacker, depth: int) -> Any:
    if depth > MAX_NESTING:
        raise SchemaCorrupt(f"Declarations nested deeper than {MAX_NESTING} levels")

    discriminant = unpacker.read_byte()
    decoder = _DECODERS.get(discriminant)
    if decoder is None:
        raise SchemaCorrupt(
            f"Unknown declaration discriminant {discriminant} at offset {unpacker.position() - 1}"
        )
    return decoder(unpacker, depth)
