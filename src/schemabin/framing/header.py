"""Schema header framing.

A self-describing blob is the schema bytes immediately followed by the payload:

    [Schema (self-terminating)] [Payload]

There is no delimiter and no outer length prefix. The schema's own counts mark
where it ends, so the split point is found by decoding the schema at offset 0.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..codec.schema import SchemaContainer
from ..codec.schema_codec import decode_schema
from ..exceptions import NoSchemaPresent, SchemaError

logger = logging.getLogger(__name__)


def wrap(schema_bytes: bytes, payload: bytes) -> bytes:
    """Prefix a payload with schema bytes.

    Args:
        schema_bytes: Output of encode_schema(), or empty for a schema-less blob
        payload: Encoded payload

    Returns:
        The concatenated blob

    Example:
        >>> blob = wrap(encode_schema(schema), encode(value, schema))
        >>> strip(blob) == encode(value, schema)
        True
    """
    return bytes(schema_bytes) + bytes(payload)


def split(blob: bytes) -> tuple[Optional[SchemaContainer], bytes, bytes]:
    """Split a blob into its schema header and payload.

    Args:
        blob: Bytes that may start with a schema header

    Returns:
        Tuple of (schema or None, schema bytes, payload bytes). When no valid
        schema parses at offset 0 the schema is None, the schema bytes are empty
        and the payload is the whole blob.
    """
    try:
        schema, consumed = decode_schema(blob)
    except SchemaError as err:
        logger.debug("No schema header: %s", err)
        return None, b"", bytes(blob)
    return schema, bytes(blob[:consumed]), bytes(blob[consumed:])


def read_header(blob: bytes) -> tuple[SchemaContainer, bytes]:
    """Decode the schema header and return it with the payload.

    Raises:
        NoSchemaPresent: If the blob does not start with a valid schema
    """
    try:
        schema, consumed = decode_schema(blob)
    except SchemaError as err:
        raise NoSchemaPresent(f"Input does not start with a schema header: {err}") from err
    return schema, bytes(blob[consumed:])


def extract(blob: bytes) -> bytes:
    """Return the schema header bytes of a blob.

    Raises:
        NoSchemaPresent: If the blob does not start with a valid schema
    """
    try:
        _, consumed = decode_schema(blob)
    except SchemaError as err:
        raise NoSchemaPresent(f"Input does not start with a schema header: {err}") from err
    return bytes(blob[:consumed])


def strip(blob: bytes) -> bytes:
    """Return the payload of a blob, dropping any schema header.

    A blob with no valid schema at offset 0 is returned unchanged.
    """
    _, _, payload = split(blob)
    return payload
