#!/usr/bin/env python3
"""Framing example for schemabin.

This example demonstrates:
1. Prefixing a payload with its schema (self-describing blobs)
2. Decoding a blob with no out-of-band schema
3. Extracting and stripping the schema header
4. Packing raw bytes as a length-prefixed blob
"""

from __future__ import annotations

from schemabin import (
    SchemaContainer,
    decode,
    encode,
    encode_schema,
    extract,
    pack_bytes,
    strip,
    unpack_bytes,
    wrap,
)
from schemabin.framing import read_header

COMMAND_SCHEMA = SchemaContainer.model_validate(
    {
        "root": "Command",
        "declarations": {
            "Command": {
                "kind": "struct",
                "fields": {"target_depth_cm": "u16", "waypoints": "Waypoints"},
            },
            "Waypoints": {"kind": "sequence", "elements": "Waypoint"},
            "Waypoint": {"kind": "tuple", "elements": ["f32", "f32"]},
        },
    }
)


def main() -> None:
    """Run the framing example."""
    print("=" * 60)
    print("schemabin Framing Example")
    print("=" * 60)
    print()

    command = {"target_depth_cm": 500, "waypoints": [[1.5, 2.25], [3.0, -0.5]]}

    # 1. Self-describing blob
    print("1. Building a self-describing blob...")
    schema_bytes = encode_schema(COMMAND_SCHEMA)
    payload = encode(command, COMMAND_SCHEMA)
    blob = wrap(schema_bytes, payload)
    print(f"   Schema header: {len(schema_bytes)} bytes")
    print(f"   Payload:       {len(payload)} bytes")
    print(f"   Blob:          {len(blob)} bytes")
    print()

    # 2. Receiver side
    print("2. Decoding the blob without a known schema...")
    schema, rest = read_header(blob)
    print(f"   Root type: {schema.root}")
    print(f"   Value: {decode(rest, schema)}")
    print()

    # 3. Header manipulation
    print("3. Splitting the blob...")
    print(f"   extract() == schema bytes: {extract(blob) == schema_bytes}")
    print(f"   strip() == payload:        {strip(blob) == payload}")
    print(f"   strip() on bare payload:   {strip(payload) == payload}")
    print()

    # 4. Raw bytes
    print("4. Packing raw bytes...")
    raw = b"sonar ping"
    packed = pack_bytes(raw)
    bare = pack_bytes(raw, include_schema=False)
    print(f"   With schema header: {len(packed)} bytes")
    print(f"   Length prefix only: {len(bare)} bytes ({bare.hex()})")
    print(f"   Unpacked: {unpack_bytes(packed)!r}")
    print()

    print("=" * 60)


if __name__ == "__main__":
    main()
