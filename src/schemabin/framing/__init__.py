"""Framing utilities for schemabin.

This module provides schema header framing (wrap/extract/strip) and
length-prefixed byte blob packing.
"""

from __future__ import annotations

from .blob import BYTES_SCHEMA, pack_bytes, unpack_bytes
from .header import extract, read_header, split, strip, wrap

__all__ = [
    "wrap",
    "extract",
    "strip",
    "split",
    "read_header",
    "pack_bytes",
    "unpack_bytes",
    "BYTES_SCHEMA",
]
