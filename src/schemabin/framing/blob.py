"""Length-prefixed byte blob framing.

Arbitrary bytes are packed as a ``u8`` sequence, optionally behind the schema
header that describes them:

    [Schema for Vec<u8> (optional)] [Length (4 bytes, little-endian)] [Payload]
"""

from __future__ import annotations

import struct

from ..codec.schema import SchemaContainer, Sequence
from ..codec.schema_codec import encode_schema
from ..exceptions import FramingError
from .header import read_header, wrap

BYTES_TYPE = "Vec<u8>"

BYTES_SCHEMA = SchemaContainer(
    declarations={BYTES_TYPE: Sequence(elements="u8")},
    root=BYTES_TYPE,
)


def pack_bytes(payload: bytes, *, include_schema: bool = True) -> bytes:
    """Frame raw bytes as a length-prefixed blob.

    Args:
        payload: Bytes to frame
        include_schema: If True, prepend the schema describing a byte sequence

    Returns:
        Framed blob

    Example:
        >>> pack_bytes(b"Hello", include_schema=False)
        b'\\x05\\x00\\x00\\x00Hello'
    """
    framed = struct.pack("<I", len(payload)) + bytes(payload)
    if include_schema:
        return wrap(encode_schema(BYTES_SCHEMA), framed)
    return framed


def unpack_bytes(blob: bytes, *, has_schema: bool = True) -> bytes:
    """Recover the raw bytes from a blob written by pack_bytes().

    Args:
        blob: Framed blob
        has_schema: If True, expect (and check) the byte-sequence schema header

    Returns:
        Original payload

    Raises:
        NoSchemaPresent: If a header is expected but missing
        FramingError: If the header describes something other than bytes, or
            the length prefix disagrees with the data
    """
    framed = bytes(blob)
    if has_schema:
        schema, framed = read_header(framed)
        if not _describes_bytes(schema):
            raise FramingError(f"Schema header describes {schema.root!r}, not a byte sequence")

    if len(framed) < 4:
        raise FramingError(f"Frame too short for length prefix: {len(framed)} bytes")

    expected = struct.unpack("<I", framed[:4])[0]
    payload = framed[4:]
    if len(payload) != expected:
        raise FramingError(
            f"Length mismatch: prefix says {expected} bytes, but got {len(payload)} bytes"
        )
    return payload


def _describes_bytes(schema: SchemaContainer) -> bool:
    root = schema.lookup(schema.root)
    return isinstance(root, Sequence) and root.elements == "u8"
