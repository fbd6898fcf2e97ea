"""Exception hierarchy for schemabin.

This module defines all custom exceptions used throughout the package.
All exceptions inherit from SchemabinError for easy catching of any schemabin-specific error.
"""

from __future__ import annotations


class SchemabinError(Exception):
    """Base exception for all schemabin errors."""

    pass


class SchemaError(SchemabinError):
    """Raised when a schema is invalid or cannot be parsed.

    Examples:
        - Unknown declaration discriminant in schema bytes
        - Type reference that names no declaration
        - Declaration that can only be satisfied by an infinite value
    """

    pass


class SchemaCorrupt(SchemaError):
    """Raised when schema bytes are malformed."""

    pass


class UnresolvedTypeReference(SchemaError):
    """Raised when a type reference names neither a built-in nor a declaration."""

    pass


class UnboundedRecursion(SchemaError):
    """Raised when a declaration refers back to itself with no way to terminate."""

    pass


class _PathError(SchemabinError):
    """Error tied to a position inside the value being processed."""

    def __init__(self, message: str, path: str = "$") -> None:
        super().__init__(f"{path}: {message}")
        self.path = path
        self.reason = message


class EncodeError(_PathError):
    """Raised when encoding a value fails.

    Examples:
        - Value shape does not match the declaration
        - Required struct field absent
        - Number out of range for the target integer width
    """

    pass


class TypeMismatch(EncodeError):
    """Raised when a value's kind is incompatible with the expected declaration."""

    pass


class FieldMissing(EncodeError):
    """Raised when a struct field is absent from the input mapping."""

    pass


class UnknownVariant(EncodeError):
    """Raised when an enum value does not name exactly one declared variant."""

    pass


class LengthMismatch(EncodeError):
    """Raised when a sequence has the wrong number of elements for a tuple or array."""

    pass


class NumericOverflow(EncodeError):
    """Raised when a number does not fit the target primitive."""

    pass


class NumericPrecisionLoss(EncodeError):
    """Raised when a fractional number is given for an integer primitive."""

    pass


class UnsupportedType(EncodeError):
    """Raised when a value has no binary representation.

    Examples:
        - null in schema-less mode
        - A non-empty sequence or array of zero-sized elements
    """

    pass


class DecodeError(_PathError):
    """Raised when decoding binary data fails.

    Examples:
        - Truncated data (insufficient bytes)
        - Enum discriminant out of range
        - String bytes that are not UTF-8
        - Bytes left over after the root value
    """

    pass


class UnexpectedEof(DecodeError):
    """Raised when the input ends before a primitive or declared count is satisfied."""

    pass


class InvalidDiscriminant(DecodeError):
    """Raised when an enum discriminant byte is not below the variant count."""

    pass


class InvalidUtf8(DecodeError):
    """Raised when string bytes are not valid UTF-8."""

    pass


class InvalidBool(DecodeError):
    """Raised when a bool byte is neither 0 nor 1."""

    pass


class InvalidLength(DecodeError):
    """Raised when a sequence count or array length of zero-sized elements is not zero."""

    pass


class TrailingBytes(DecodeError):
    """Raised in strict mode when bytes remain after the root value."""

    pass


class FramingError(SchemabinError):
    """Raised when header framing or blob packing fails.

    Examples:
        - No schema header at the start of a blob
        - Blob length prefix inconsistent with the data
    """

    pass


class NoSchemaPresent(FramingError):
    """Raised when a blob does not start with a valid schema header."""

    pass
