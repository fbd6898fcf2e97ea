"""Utility functions for schemabin.

This module provides size calculation for schema types.
"""

from __future__ import annotations

from .sizing import field_sizes, fixed_size

__all__ = [
    "fixed_size",
    "field_sizes",
]
