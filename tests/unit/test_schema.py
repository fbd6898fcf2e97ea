"""Unit tests for the schema model and its validation."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from schemabin import (
    Array,
    Enum,
    Primitive,
    SchemaContainer,
    SchemaCorrupt,
    Sequence,
    Struct,
    UnboundedRecursion,
    UnresolvedTypeReference,
)


class TestAuthoring:
    """Test building schemas from JSON-like data and Python objects."""

    def test_struct_fields_from_mapping(self) -> None:
        """Test the {field: type} shortcut keeps field order."""
        schema = SchemaContainer.model_validate(
            {
                "root": "P",
                "declarations": {"P": {"kind": "struct", "fields": {"y": "u8", "x": "u8"}}},
            }
        )
        assert schema.declarations["P"].fields == [("y", "u8"), ("x", "u8")]

    def test_enum_variant_shorthand(self) -> None:
        """Test a variant given as a type name becomes a primitive reference."""
        schema = SchemaContainer.model_validate(
            {"root": "E", "declarations": {"E": {"kind": "enum", "variants": [["A", "u32"]]}}}
        )
        assert schema.declarations["E"].variants == [("A", Primitive(name="u32"))]

    def test_python_objects(self) -> None:
        """Test constructing a container from declaration instances."""
        schema = SchemaContainer(
            declarations={
                "Bytes": Sequence(elements="u8"),
                "Opt": Enum(variants=[("None", Struct()), ("Some", Primitive(name="Bytes"))]),
            },
            root="Opt",
        )
        assert schema.lookup("Opt").variant_names() == ["None", "Some"]

    def test_builtin_root(self) -> None:
        """Test a schema may describe a single primitive."""
        schema = SchemaContainer(root="string")
        assert schema.lookup("string") is None

    def test_unknown_kind(self) -> None:
        """Test an unknown declaration kind fails validation."""
        with pytest.raises(ValidationError):
            SchemaContainer.model_validate(
                {"root": "X", "declarations": {"X": {"kind": "map", "elements": "u8"}}}
            )

    def test_negative_array_length(self) -> None:
        """Test array lengths must be non-negative."""
        with pytest.raises(ValidationError):
            Array(elements="u8", length=-1)


class TestReferences:
    """Test eager reference resolution."""

    def test_unresolved_field_type(self) -> None:
        """Test a struct field naming an unknown type."""
        with pytest.raises(UnresolvedTypeReference, match="Missing"):
            SchemaContainer(declarations={"S": Struct(fields=[("x", "Missing")])}, root="S")

    def test_unresolved_root(self) -> None:
        """Test the root must be declared."""
        with pytest.raises(UnresolvedTypeReference, match="Root"):
            SchemaContainer(declarations={}, root="Nowhere")

    def test_unresolved_enum_payload(self) -> None:
        """Test references inside enum payloads are checked."""
        with pytest.raises(UnresolvedTypeReference):
            SchemaContainer(
                declarations={"E": Enum(variants=[("A", Sequence(elements="Ghost"))])},
                root="E",
            )

    def test_lookup_unknown(self) -> None:
        """Test lookup of an undeclared name."""
        schema = SchemaContainer(root="u8")
        with pytest.raises(UnresolvedTypeReference):
            schema.lookup("Ghost")


class TestStructuralChecks:
    """Test duplicate names and limits."""

    def test_duplicate_field(self) -> None:
        """Test duplicate struct field names are rejected."""
        with pytest.raises(SchemaCorrupt, match="duplicate field"):
            SchemaContainer(
                declarations={"S": Struct(fields=[("x", "u8"), ("x", "u16")])}, root="S"
            )

    def test_duplicate_variant(self) -> None:
        """Test duplicate enum variant names are rejected."""
        with pytest.raises(SchemaCorrupt, match="duplicate variant"):
            SchemaContainer(
                declarations={
                    "E": Enum(variants=[("A", Primitive(name="u8")), ("A", Primitive(name="u8"))])
                },
                root="E",
            )

    def test_shadowing_builtin(self) -> None:
        """Test declarations may not reuse built-in names."""
        with pytest.raises(SchemaCorrupt, match="built-in"):
            SchemaContainer(declarations={"u32": Struct()}, root="u32")

    def test_too_many_variants(self) -> None:
        """Test enums are limited to one discriminant byte."""
        variants = [(f"V{i}", Struct()) for i in range(257)]
        with pytest.raises(SchemaCorrupt, match="max 256"):
            SchemaContainer(declarations={"E": Enum(variants=variants)}, root="E")


class TestRecursion:
    """Test detection of declarations that can never terminate."""

    def test_direct_self_reference(self) -> None:
        """Test a struct containing itself."""
        with pytest.raises(UnboundedRecursion, match="Node"):
            SchemaContainer(declarations={"Node": Struct(fields=[("next", "Node")])}, root="Node")

    def test_alias_cycle(self) -> None:
        """Test two aliases naming each other."""
        with pytest.raises(UnboundedRecursion):
            SchemaContainer(
                declarations={"A": Primitive(name="B"), "B": Primitive(name="A")}, root="A"
            )

    def test_array_cycle(self) -> None:
        """Test a non-empty fixed array of the enclosing type."""
        with pytest.raises(UnboundedRecursion):
            SchemaContainer(
                declarations={
                    "T": Struct(fields=[("children", "Pair")]),
                    "Pair": Array(elements="T", length=2),
                },
                root="T",
            )

    def test_sequence_breaks_cycle(self) -> None:
        """Test recursion through a sequence is allowed (it can be empty)."""
        schema = SchemaContainer(
            declarations={
                "Tree": Struct(fields=[("value", "u8"), ("children", "Trees")]),
                "Trees": Sequence(elements="Tree"),
            },
            root="Tree",
        )
        assert schema.root == "Tree"

    def test_enum_with_base_case(self) -> None:
        """Test recursion through an enum with a terminating variant is allowed."""
        schema = SchemaContainer(
            declarations={
                "List": Enum(
                    variants=[
                        ("Nil", Struct()),
                        ("Cons", Struct(fields=[("head", "u8"), ("tail", "List")])),
                    ]
                )
            },
            root="List",
        )
        assert schema.root == "List"

    def test_enum_without_base_case(self) -> None:
        """Test an enum whose every variant recurses."""
        with pytest.raises(UnboundedRecursion):
            SchemaContainer(
                declarations={"E": Enum(variants=[("Again", Primitive(name="E"))])}, root="E"
            )
