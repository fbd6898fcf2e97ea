"""Schema model for the binary format.

A schema is a table of named declarations plus the name of the root type.
Declarations refer to each other (and to the built-in primitives) by name, so
recursive types are expressed without any object cycles.

The models are Pydantic, which also makes them the JSON authoring format:

    >>> schema = SchemaContainer.model_validate({
    ...     "root": "Point",
    ...     "declarations": {
    ...         "Point": {"kind": "struct", "fields": [["x", "i32"], ["y", "i32"]]},
    ...     },
    ... })
"""

from __future__ import annotations

from typing import Annotated, Any, Dict, Iterator, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..exceptions import SchemaCorrupt, UnboundedRecursion, UnresolvedTypeReference

INTEGER_TYPES: Dict[str, tuple[int, bool]] = {
    "u8": (1, False),
    "u16": (2, False),
    "u32": (4, False),
    "u64": (8, False),
    "u128": (16, False),
    "i8": (1, True),
    "i16": (2, True),
    "i32": (4, True),
    "i64": (8, True),
    "i128": (16, True),
}

FLOAT_TYPES: Dict[str, int] = {"f32": 4, "f64": 8}

BUILTIN_TYPES = frozenset([*INTEGER_TYPES, *FLOAT_TYPES, "bool", "string"])

MAX_ENUM_VARIANTS = 256


class _Declaration(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class Primitive(_Declaration):
    """A bare reference to a built-in primitive or another declaration."""

    kind: Literal["primitive"] = "primitive"
    name: str


class Struct(_Declaration):
    """Named fields, encoded in declaration order with no tags."""

    kind: Literal["struct"] = "struct"
    fields: List[tuple[str, str]] = Field(default_factory=list)

    @field_validator("fields", mode="before")
    @classmethod
    def _fields_from_mapping(cls, value: Any) -> Any:
        # Authoring shortcut: {"x": "u8", "y": "u8"}
        if isinstance(value, dict):
            return list(value.items())
        return value


class TupleStruct(_Declaration):
    """Positional fields of a named tuple-like type."""

    kind: Literal["tuple_struct"] = "tuple_struct"
    fields: List[str] = Field(default_factory=list)


class Enum(_Declaration):
    """Tagged union: one discriminant byte then the selected variant's payload."""

    kind: Literal["enum"] = "enum"
    variants: List[tuple[str, "Declaration"]] = Field(default_factory=list)

    @field_validator("variants", mode="before")
    @classmethod
    def _variants_shorthand(cls, value: Any) -> Any:
        if isinstance(value, dict):
            value = list(value.items())
        if not isinstance(value, list):
            return value
        normalized = []
        for item in value:
            if isinstance(item, (list, tuple)) and len(item) == 2 and isinstance(item[1], str):
                item = (item[0], {"kind": "primitive", "name": item[1]})
            normalized.append(item)
        return normalized

    def variant_names(self) -> List[str]:
        return [name for name, _ in self.variants]


class Sequence(_Declaration):
    """Variable-length list with a u32 count prefix."""

    kind: Literal["sequence"] = "sequence"
    elements: str


class Array(_Declaration):
    """Fixed-length list with no prefix."""

    kind: Literal["array"] = "array"
    elements: str
    length: int = Field(ge=0, le=0xFFFFFFFF)


class Tuple(_Declaration):
    """Anonymous positional tuple."""

    kind: Literal["tuple"] = "tuple"
    elements: List[str] = Field(default_factory=list)


Declaration = Annotated[
    Union[Primitive, Struct, TupleStruct, Enum, Sequence, Array, Tuple],
    Field(discriminator="kind"),
]

Enum.model_rebuild()


def is_unit(declaration: Any) -> bool:
    """Return True if a declaration encodes to zero bytes by construction."""
    if isinstance(declaration, (Struct, TupleStruct)):
        return not declaration.fields
    if isinstance(declaration, Tuple):
        return not declaration.elements
    return False


def iter_refs(declaration: Any) -> Iterator[str]:
    """Yield every type name a declaration refers to, nested enum payloads included."""
    if isinstance(declaration, Primitive):
        yield declaration.name
    elif isinstance(declaration, Struct):
        for _, type_name in declaration.fields:
            yield type_name
    elif isinstance(declaration, TupleStruct):
        yield from declaration.fields
    elif isinstance(declaration, Tuple):
        yield from declaration.elements
    elif isinstance(declaration, (Sequence, Array)):
        yield declaration.elements
    elif isinstance(declaration, Enum):
        for _, payload in declaration.variants:
            yield from iter_refs(payload)


def _terminates(declaration: Any, finite: set[str]) -> bool:
    """Whether a declaration has a finite value given the names already known finite."""
    if isinstance(declaration, Primitive):
        return declaration.name in finite
    if isinstance(declaration, Sequence):
        return True
    if isinstance(declaration, Array):
        return declaration.length == 0 or declaration.elements in finite
    if isinstance(declaration, Enum):
        if not declaration.variants:
            return True
        return any(_terminates(payload, finite) for _, payload in declaration.variants)
    return all(name in finite for name in iter_refs(declaration))


class SchemaContainer(BaseModel):
    """A complete schema: named declarations and the root type name.

    Validation runs eagerly on construction, so an instance always has every
    reference resolved and no declaration that requires an infinite value.

    Attributes:
        declarations: Mapping of type name to declaration
        root: Name of the type a payload encodes (a declaration or a built-in)
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    declarations: Dict[str, Declaration] = Field(default_factory=dict)
    root: str

    @model_validator(mode="after")
    def _check(self) -> "SchemaContainer":
        self.validate_refs()
        return self

    def lookup(self, name: str) -> Optional[Any]:
        """Return the declaration for ``name``, or None for a built-in primitive."""
        if name in BUILTIN_TYPES:
            return None
        try:
            return self.declarations[name]
        except KeyError:
            raise UnresolvedTypeReference(f"Unknown type {name!r}") from None

    def validate_refs(self) -> None:
        """Check names, references and termination of every declaration.

        Raises:
            SchemaCorrupt: If names are duplicated, shadow built-ins, or an enum is too large
            UnresolvedTypeReference: If a reference or the root names no type
            UnboundedRecursion: If a declaration cannot be finitely encoded
        """
        for name, declaration in self.declarations.items():
            if name in BUILTIN_TYPES:
                raise SchemaCorrupt(f"Declaration {name!r} shadows a built-in type")
            self._check_declaration(name, declaration)

        if self.root not in BUILTIN_TYPES and self.root not in self.declarations:
            raise UnresolvedTypeReference(f"Root type {self.root!r} is not declared")

        finite = set(BUILTIN_TYPES)
        changed = True
        while changed:
            changed = False
            for name, declaration in self.declarations.items():
                if name not in finite and _terminates(declaration, finite):
                    finite.add(name)
                    changed = True

        recursive = [name for name in self.declarations if name not in finite]
        if recursive:
            raise UnboundedRecursion(
                f"Declarations refer to themselves with no terminating case: "
                f"{', '.join(sorted(recursive))}"
            )

    def _check_declaration(self, owner: str, declaration: Any) -> None:
        if isinstance(declaration, Struct):
            _check_unique(owner, "field", [field for field, _ in declaration.fields])
        elif isinstance(declaration, Enum):
            if len(declaration.variants) > MAX_ENUM_VARIANTS:
                raise SchemaCorrupt(
                    f"Enum {owner!r} has {len(declaration.variants)} variants "
                    f"(max {MAX_ENUM_VARIANTS})"
                )
            _check_unique(owner, "variant", declaration.variant_names())
            for variant, payload in declaration.variants:
                self._check_declaration(f"{owner}::{variant}", payload)
            return

        for ref in iter_refs(declaration):
            if ref not in BUILTIN_TYPES and ref not in self.declarations:
                raise UnresolvedTypeReference(f"{owner}: unknown type {ref!r}")


def _check_unique(owner: str, what: str, names: List[str]) -> None:
    seen: set[str] = set()
    for name in names:
        if name in seen:
            raise SchemaCorrupt(f"{owner}: duplicate {what} {name!r}")
        seen.add(name)
