"""Schema description CLI command."""

from __future__ import annotations

from typing import Any, List, TextIO

from ..codec.schema import (
    Array,
    Enum,
    Primitive,
    SchemaContainer,
    Sequence,
    Struct,
    Tuple,
    TupleStruct,
)
from ..utils.sizing import fixed_size

_WIDTH = 54


def describe_schema(schema: SchemaContainer, out: TextIO) -> None:
    """Print every declaration of a schema with its encoded size.

    Args:
        schema: Schema to describe
        out: Text stream to write to
    """
    count = len(schema.declarations)
    print("|" * 7, "schemabin: schema-driven binary codec", "|" * 7, file=out)
    print(f"{count} declaration{'s' if count != 1 else ''} loaded.", file=out)
    print(f"Root type: {schema.root}", file=out)
    print("Sizes are in bytes; '*' marks variable-size types.", file=out)
    print(file=out)

    for name in sorted(schema.declarations):
        _describe_declaration(schema, name, out)


def _describe_declaration(schema: SchemaContainer, name: str, out: TextIO) -> None:
    declaration = schema.declarations[name]
    marker = " (root)" if name == schema.root else ""
    print(f"{'=' * 19} {name}{marker} {'=' * 19}", file=out)

    size = fixed_size(schema, name)
    _dotted(f"{declaration.kind}", _size_text(size), out)

    for label, size_text in _member_lines(schema, declaration):
        _dotted(f"        {label}", size_text, out)
    print(file=out)


def _member_lines(schema: SchemaContainer, declaration: Any) -> List[tuple[str, str]]:
    if isinstance(declaration, Struct):
        return [
            (f"{field}: {ref}", _size_text(fixed_size(schema, ref)))
            for field, ref in declaration.fields
        ]
    if isinstance(declaration, TupleStruct):
        return [(ref, _size_text(fixed_size(schema, ref))) for ref in declaration.fields]
    if isinstance(declaration, Tuple):
        return [(ref, _size_text(fixed_size(schema, ref))) for ref in declaration.elements]
    if isinstance(declaration, Sequence):
        return [(f"[{declaration.elements}] (u32 count prefix)", "*")]
    if isinstance(declaration, Array):
        element_size = _size_text(fixed_size(schema, declaration.elements))
        return [(f"[{declaration.elements}; {declaration.length}] of", element_size)]
    if isinstance(declaration, Enum):
        return [
            (f"{index}: {variant} = {_summary(payload)}", "")
            for index, (variant, payload) in enumerate(declaration.variants)
        ]
    if isinstance(declaration, Primitive):
        target_size = _size_text(fixed_size(schema, declaration.name))
        return [(f"alias of {declaration.name}", target_size)]
    return []


def _summary(declaration: Any) -> str:
    if isinstance(declaration, Primitive):
        return declaration.name
    if isinstance(declaration, Struct):
        if not declaration.fields:
            return "unit"
        return "{" + ", ".join(f"{field}: {ref}" for field, ref in declaration.fields) + "}"
    if isinstance(declaration, TupleStruct):
        return "unit" if not declaration.fields else "(" + ", ".join(declaration.fields) + ")"
    if isinstance(declaration, Tuple):
        return "unit" if not declaration.elements else "(" + ", ".join(declaration.elements) + ")"
    if isinstance(declaration, Sequence):
        return f"[{declaration.elements}]"
    if isinstance(declaration, Array):
        return f"[{declaration.elements}; {declaration.length}]"
    return declaration.kind


def _size_text(size: Any) -> str:
    return "*" if size is None else f"{size} bytes"


def _dotted(label: str, value: str, out: TextIO) -> None:
    if not value:
        print(label, file=out)
        return
    dots = "." * max(1, _WIDTH - len(label) - len(value))
    print(f"{label}{dots}{value}", file=out)
