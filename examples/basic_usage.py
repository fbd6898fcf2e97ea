#!/usr/bin/env python3
"""Basic usage example for schemabin.

This example demonstrates:
1. Declaring a schema (the JSON authoring form)
2. Encoding a JSON value to the binary format
3. Decoding back to a JSON value
4. Calculating encoded sizes
"""

from __future__ import annotations

from schemabin import (
    SchemaContainer,
    decode,
    encode,
    field_sizes,
    fixed_size,
    render_value,
    values_equal,
)

STATUS_SCHEMA = SchemaContainer.model_validate(
    {
        "root": "StatusReport",
        "declarations": {
            "StatusReport": {
                "kind": "struct",
                "fields": {
                    "vehicle_id": "u8",
                    "depth_cm": "u16",
                    "battery_pct": "u8",
                    "active": "bool",
                    "phase": "Phase",
                },
            },
            "Phase": {
                "kind": "enum",
                "variants": [
                    ["Startup", {"kind": "struct"}],
                    ["Survey", {"kind": "struct", "fields": {"leg": "u8"}}],
                    ["Return", {"kind": "struct"}],
                ],
            },
        },
    }
)


def main() -> None:
    """Run the basic usage example."""
    print("=" * 60)
    print("schemabin Basic Usage Example")
    print("=" * 60)
    print()

    # Create a value
    print("1. Creating a status report value...")
    report = {
        "vehicle_id": 42,
        "depth_cm": 2500,
        "battery_pct": 87,
        "active": True,
        "phase": {"Survey": {"leg": 3}},
    }
    print(f"   {render_value(report)}")
    print()

    # Analyze field sizes
    print("2. Analyzing field sizes...")
    for field_name, size in field_sizes(STATUS_SCHEMA).items():
        print(f"   {field_name}: {'variable' if size is None else f'{size} bytes'}")
    total = fixed_size(STATUS_SCHEMA)
    print(f"   Total: {'variable' if total is None else f'{total} bytes'}")
    print()

    # Encode the value
    print("3. Encoding to binary...")
    encoded_data = encode(report, STATUS_SCHEMA)

    print(f"   Encoded size: {len(encoded_data)} bytes")
    print(f"   Hex: {encoded_data.hex()}")
    print()

    # Decode the value
    print("4. Decoding from binary...")
    decoded = decode(encoded_data, STATUS_SCHEMA)
    print(f"   {render_value(decoded)}")
    print()

    # Verify round-trip
    print("5. Verifying round-trip...")
    if values_equal(decoded, report):
        print("   ✓ Round-trip successful! Decoded value matches original.")
    else:
        print("   ✗ Round-trip failed!")
    print()

    # A unit variant is written as its name
    print("6. Encoding a unit variant...")
    report["phase"] = "Return"
    encoded_data = encode(report, STATUS_SCHEMA)
    print(f"   Encoded size: {len(encoded_data)} bytes")
    print(f"   Decoded phase: {decode(encoded_data, STATUS_SCHEMA)['phase']}")
    print()

    print("=" * 60)


if __name__ == "__main__":
    main()
