"""Binary codec for schemabin.

This module provides the schema model, the binary encoding of schemas, and
schema-guided (and schema-less) encoding and decoding of values.
"""

from __future__ import annotations

from .decoder import decode
from .encoder import encode
from .schema import (
    BUILTIN_TYPES,
    Array,
    Enum,
    Primitive,
    SchemaContainer,
    Sequence,
    Struct,
    Tuple,
    TupleStruct,
)
from .schema_codec import decode_schema, encode_schema
from .schemaless import encode_schemaless

__all__ = [
    "encode",
    "decode",
    "encode_schemaless",
    "encode_schema",
    "decode_schema",
    "SchemaContainer",
    "Primitive",
    "Struct",
    "TupleStruct",
    "Enum",
    "Sequence",
    "Array",
    "Tuple",
    "BUILTIN_TYPES",
]
