"""Encoded size calculation utilities.

This module provides functions to calculate the encoded size of schema types
without actually encoding a value.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from ..codec.schema import (
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
)


def fixed_size(schema: SchemaContainer, type_name: Optional[str] = None) -> Optional[int]:
    """Calculate the encoded size of a type in bytes, if every value has the same size.

    Strings and sequences carry a length prefix and make a type variable-sized.
    An enum is fixed-size only when all of its variants encode to the same size.

    Args:
        schema: Schema holding the declarations
        type_name: Type to measure (defaults to the schema root)

    Returns:
        Size in bytes, or None for variable-sized types

    Example:
        >>> schema = SchemaContainer.model_validate({
        ...     "root": "Pos",
        ...     "declarations": {"Pos": {"kind": "struct", "fields": {"x": "i32", "y": "i32"}}},
        ... })
        >>> fixed_size(schema)
        8
    """
    return _type_size(schema, type_name or schema.root, set())


def field_sizes(
    schema: SchemaContainer, type_name: Optional[str] = None
) -> Dict[str, Optional[int]]:
    """Get the fixed size in bytes of each field of a struct type.

    Args:
        schema: Schema holding the declarations
        type_name: Struct type to analyze (defaults to the schema root)

    Returns:
        Dictionary mapping field names to their size (None when variable)

    Raises:
        TypeError: If the type is not a struct
    """
    name = type_name or schema.root
    declaration = schema.lookup(name)
    if not isinstance(declaration, Struct):
        raise TypeError(f"{name} is not a struct")
    return {field: _type_size(schema, ref, set()) for field, ref in declaration.fields}


def _type_size(schema: SchemaContainer, type_name: str, visiting: set[str]) -> Optional[int]:
    if type_name == "bool":
        return 1
    if type_name in INTEGER_TYPES:
        return INTEGER_TYPES[type_name][0]
    if type_name in FLOAT_TYPES:
        return FLOAT_TYPES[type_name]
    if type_name == "string":
        return None

    # A type reached again through itself can nest to any depth
    if type_name in visiting:
        return None
    visiting = visiting | {type_name}
    return _declaration_size(schema, schema.lookup(type_name), visiting)


def _declaration_size(
    schema: SchemaContainer, declaration: Any, visiting: set[str]
) -> Optional[int]:
    if isinstance(declaration, Primitive):
        return _type_size(schema, declaration.name, visiting)

    if isinstance(declaration, Sequence):
        return None

    if isinstance(declaration, Array):
        if declaration.length == 0:
            return 0
        element = _type_size(schema, declaration.elements, visiting)
        return None if element is None else element * declaration.length

    if isinstance(declaration, Enum):
        sizes = {
            _declaration_size(schema, payload, visiting) for _, payload in declaration.variants
        }
        if len(sizes) != 1 or None in sizes:
            return None
        return 1 + sizes.pop()

    if isinstance(declaration, Struct):
        refs = [ref for _, ref in declaration.fields]
    elif isinstance(declaration, TupleStruct):
        refs = list(declaration.fields)
    elif isinstance(declaration, Tuple):
        refs = list(declaration.elements)
    else:
        raise TypeError(f"Not a schema declaration: {type(declaration).__name__}")

    total = 0
    for ref in refs:
        size = _type_size(schema, ref, visiting)
        if size is None:
            return None
        total += size
    return total
