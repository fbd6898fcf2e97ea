"""schemabin: schema-driven binary codec

A Python library for converting JSON-like values to and from a compact,
deterministic, little-endian binary format. A schema (itself stored in the same
binary format) decides how each value is laid out, and can travel in front of
the payload as a self-describing header.

Key Features:
- Pydantic-based schema model with a JSON authoring format
- Structs, tuple structs, enums, sequences, fixed arrays and tuples
- Exact error taxonomy for malformed or mismatched data
- Best-effort schema-less encoding when no schema is available

Quick Start:
    >>> from schemabin import SchemaContainer, decode, encode
    >>>
    >>> schema = SchemaContainer.model_validate({
    ...     "root": "Msg",
    ...     "declarations": {"Msg": {"kind": "struct", "fields": {"a": "u32", "b": "string"}}},
    ... })
    >>> data = encode({"a": 7, "b": "hi"}, schema)
    >>> data.hex()
    '07000000020000006869'
    >>> decode(data, schema)
    {'a': 7, 'b': 'hi'}
"""

from __future__ import annotations

from .codec import (
    BUILTIN_TYPES,
    Array,
    Enum,
    Primitive,
    SchemaContainer,
    Sequence,
    Struct,
    Tuple,
    TupleStruct,
    decode,
    decode_schema,
    encode,
    encode_schema,
    encode_schemaless,
)
from .config import CodecOptions
from .exceptions import (
    DecodeError,
    EncodeError,
    FieldMissing,
    FramingError,
    InvalidBool,
    InvalidDiscriminant,
    InvalidLength,
    InvalidUtf8,
    LengthMismatch,
    NoSchemaPresent,
    NumericOverflow,
    NumericPrecisionLoss,
    SchemabinError,
    SchemaCorrupt,
    SchemaError,
    TrailingBytes,
    TypeMismatch,
    UnboundedRecursion,
    UnexpectedEof,
    UnknownVariant,
    UnresolvedTypeReference,
    UnsupportedType,
)
from .framing import extract, pack_bytes, split, strip, unpack_bytes, wrap
from .utils import field_sizes, fixed_size
from .values import Value, ValueKind, kind_of, parse_value, render_value, values_equal

__version__ = "0.1.0"

__all__ = [
    # Core API
    "encode",
    "decode",
    "encode_schemaless",
    "encode_schema",
    "decode_schema",
    "CodecOptions",
    # Schema model
    "SchemaContainer",
    "Primitive",
    "Struct",
    "TupleStruct",
    "Enum",
    "Sequence",
    "Array",
    "Tuple",
    "BUILTIN_TYPES",
    # Values
    "Value",
    "ValueKind",
    "kind_of",
    "parse_value",
    "render_value",
    "values_equal",
    # Exceptions
    "SchemabinError",
    "SchemaError",
    "SchemaCorrupt",
    "UnresolvedTypeReference",
    "UnboundedRecursion",
    "EncodeError",
    "TypeMismatch",
    "FieldMissing",
    "UnknownVariant",
    "LengthMismatch",
    "NumericOverflow",
    "NumericPrecisionLoss",
    "UnsupportedType",
    "DecodeError",
    "UnexpectedEof",
    "InvalidDiscriminant",
    "InvalidUtf8",
    "InvalidBool",
    "InvalidLength",
    "TrailingBytes",
    "FramingError",
    "NoSchemaPresent",
    # Framing
    "wrap",
    "extract",
    "strip",
    "split",
    "pack_bytes",
    "unpack_bytes",
    # Sizing
    "fixed_size",
    "field_sizes",
    # Version
    "__version__",
]
