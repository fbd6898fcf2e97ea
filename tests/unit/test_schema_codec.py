"""Unit tests for the binary schema encoding."""

from __future__ import annotations

import struct

import pytest

from schemabin import (
    Array,
    Enum,
    Primitive,
    SchemaContainer,
    SchemaCorrupt,
    Sequence,
    Struct,
    Tuple,
    TupleStruct,
    UnresolvedTypeReference,
    decode_schema,
    encode_schema,
)


def _s(text: str) -> bytes:
    raw = text.encode("utf-8")
    return struct.pack("<I", len(raw)) + raw


def _u32(value: int) -> bytes:
    return struct.pack("<I", value)


class TestEncodeSchema:
    """Test the schema byte layout."""

    def test_struct_layout(self, message_schema: SchemaContainer) -> None:
        """Test exact bytes of a one-struct schema."""
        expected = (
            _u32(1)
            + _s("Msg")
            + b"\x04"
            + _u32(2)
            + _s("a")
            + _s("u32")
            + _s("b")
            + _s("string")
            + _s("Msg")
        )
        assert encode_schema(message_schema) == expected

    def test_builtin_root(self) -> None:
        """Test a schema with no declarations."""
        assert encode_schema(SchemaContainer(root="u8")) == _u32(0) + _s("u8")

    def test_declarations_in_name_order(self) -> None:
        """Test output does not depend on declaration insertion order."""
        first = SchemaContainer(
            declarations={"B": Sequence(elements="u8"), "A": Sequence(elements="B")}, root="A"
        )
        second = SchemaContainer(
            declarations={"A": Sequence(elements="B"), "B": Sequence(elements="u8")}, root="A"
        )
        encoded = encode_schema(first)
        assert encoded == encode_schema(second)
        assert encoded.index(_s("A")) < encoded.index(_s("B"))

    def test_array_layout(self) -> None:
        """Test arrays carry the element type then a u32 length."""
        schema = SchemaContainer(declarations={"A": Array(elements="u8", length=3)}, root="A")
        assert encode_schema(schema) == _u32(1) + _s("A") + b"\x00" + _s("u8") + _u32(3) + _s("A")

    def test_enum_layout(self, third_schema: SchemaContainer) -> None:
        """Test enum variants nest their payload declarations."""
        expected = (
            _u32(1)
            + _s("Third")
            + b"\x03"
            + _u32(3)
            + _s("Alpha")
            + b"\x04"
            + _u32(1)
            + _s("field")
            + _s("u32")
            + _s("Beta")
            + b"\x06"
            + _s("u32")
            + _s("Gamma")
            + b"\x04"
            + _u32(0)
            + _s("Third")
        )
        assert encode_schema(third_schema) == expected


class TestDecodeSchema:
    """Test schema decoding."""

    def test_roundtrip_every_kind(self) -> None:
        """Test each declaration kind survives encode/decode."""
        schema = SchemaContainer(
            declarations={
                "Arr": Array(elements="f32", length=4),
                "Seq": Sequence(elements="Arr"),
                "Tup": Tuple(elements=["i8", "Seq"]),
                "TS": TupleStruct(fields=["u128", "bool"]),
                "St": Struct(fields=[("t", "Tup"), ("ts", "TS")]),
                "Alias": Primitive(name="St"),
                "En": Enum(
                    variants=[
                        ("Unit", Struct()),
                        ("Inline", Tuple(elements=["u16", "string"])),
                        ("Ref", Primitive(name="Alias")),
                    ]
                ),
            },
            root="En",
        )
        data = encode_schema(schema)
        decoded, consumed = decode_schema(data)

        assert consumed == len(data)
        assert decoded == schema

    def test_consumed_excludes_payload(self, message_schema: SchemaContainer) -> None:
        """Test bytes after the schema are not consumed."""
        data = encode_schema(message_schema)
        _, consumed = decode_schema(data + b"payload bytes")
        assert consumed == len(data)

    def test_offset(self, message_schema: SchemaContainer) -> None:
        """Test decoding from a non-zero offset."""
        data = encode_schema(message_schema)
        decoded, consumed = decode_schema(b"\xff\xff" + data, offset=2)
        assert decoded == message_schema
        assert consumed == len(data)

    def test_unknown_discriminant(self) -> None:
        """Test an unrecognized declaration tag."""
        data = _u32(1) + _s("X") + b"\x09" + _s("u8") + _s("X")
        with pytest.raises(SchemaCorrupt, match="discriminant 9"):
            decode_schema(data)

    def test_count_exceeds_remaining(self) -> None:
        """Test a count implying more bytes than remain."""
        data = _u32(1_000_000) + _s("X")
        with pytest.raises(SchemaCorrupt, match="exceeds remaining"):
            decode_schema(data)

    def test_truncated(self, message_schema: SchemaContainer) -> None:
        """Test every proper prefix of a schema is rejected."""
        data = encode_schema(message_schema)
        for cut in range(len(data)):
            with pytest.raises(SchemaCorrupt):
                decode_schema(data[:cut])

    def test_duplicate_declaration(self) -> None:
        """Test the same name declared twice."""
        declaration = b"\x01" + _s("u8")
        data = _u32(2) + _s("X") + declaration + _s("X") + declaration + _s("X")
        with pytest.raises(SchemaCorrupt, match="Duplicate"):
            decode_schema(data)

    def test_invalid_utf8_name(self) -> None:
        """Test names must be UTF-8."""
        data = _u32(0) + _u32(2) + b"\xff\xfe"
        with pytest.raises(SchemaCorrupt, match="UTF-8"):
            decode_schema(data)

    def test_unresolved_after_parse(self) -> None:
        """Test references are resolved once the whole schema is read."""
        data = _u32(1) + _s("S") + b"\x01" + _s("Missing") + _s("S")
        with pytest.raises(UnresolvedTypeReference, match="Missing"):
            decode_schema(data)

    def test_forward_reference(self) -> None:
        """Test a declaration may refer to one that appears later."""
        data = (
            _u32(2)
            + _s("A")
            + b"\x01"
            + _s("B")
            + _s("B")
            + b"\x06"
            + _s("u8")
            + _s("A")
        )
        schema, _ = decode_schema(data)
        assert schema.lookup("A") == Sequence(elements="B")
