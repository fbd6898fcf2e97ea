"""Per-call codec options."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class CodecOptions(BaseModel):
    """Options controlling encode/decode behaviour.

    Attributes:
        strict_trailing: Treat bytes left after the root value as an error (default True).
            When False, leftover bytes are ignored.
        max_depth: Maximum nesting depth of values and declarations (default 128).

    Examples:
        ```python
        from schemabin import CodecOptions, decode

        value = decode(data, schema, CodecOptions(strict_trailing=False))
        ```
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    strict_trailing: bool = True
    max_depth: int = Field(default=128, ge=1)


DEFAULT_OPTIONS = CodecOptions()
