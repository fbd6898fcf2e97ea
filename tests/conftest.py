"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import pytest

from schemabin import SchemaContainer


@pytest.fixture
def message_schema() -> SchemaContainer:
    """Struct{a: u32, b: string}."""
    return SchemaContainer.model_validate(
        {
            "root": "Msg",
            "declarations": {
                "Msg": {"kind": "struct", "fields": [["a", "u32"], ["b", "string"]]},
            },
        }
    )


@pytest.fixture
def third_schema() -> SchemaContainer:
    """Enum with a struct variant, a newtype-like variant and a unit variant."""
    return SchemaContainer.model_validate(
        {
            "root": "Third",
            "declarations": {
                "Third": {
                    "kind": "enum",
                    "variants": [
                        ["Alpha", {"kind": "struct", "fields": [["field", "u32"]]}],
                        ["Beta", {"kind": "primitive", "name": "u32"}],
                        ["Gamma", {"kind": "struct", "fields": []}],
                    ],
                },
            },
        }
    )


@pytest.fixture
def nested_schema() -> SchemaContainer:
    """Nested structs, a tuple, enums and a sequence of strings."""
    return SchemaContainer.model_validate(
        {
            "root": "First",
            "declarations": {
                "First": {
                    "kind": "struct",
                    "fields": [
                        ["a", "(u32, u64)"],
                        ["b", "string"],
                        ["c", "Second"],
                        ["e", "Vec<string>"],
                    ],
                },
                "(u32, u64)": {"kind": "tuple", "elements": ["u32", "u64"]},
                "Second": {
                    "kind": "struct",
                    "fields": [
                        ["a", "Third"],
                        ["b", "Third"],
                        ["c", "Third"],
                        ["d", "u32"],
                        ["e", "u32"],
                    ],
                },
                "Third": {
                    "kind": "enum",
                    "variants": [
                        ["Alpha", {"kind": "struct", "fields": [["field", "u32"]]}],
                        ["Beta", "u32"],
                        ["Gamma", {"kind": "struct"}],
                    ],
                },
                "Vec<string>": {"kind": "sequence", "elements": "string"},
            },
        }
    )


@pytest.fixture
def nested_value() -> dict:
    """A value matching nested_schema."""
    return {
        "a": [32, 64],
        "b": "String",
        "c": {
            "a": {"Alpha": {"field": 1}},
            "b": {"Beta": 1},
            "c": "Gamma",
            "d": 2,
            "e": 3,
        },
        "e": ["a", "b", "c"],
    }
