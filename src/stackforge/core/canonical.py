# src/stackforge/core/canonical.py
"""Canonical JSON serialization for deterministic hashing.

Templates are hashed over their RFC 8785 (JCS) canonical form, produced by
the rfc8785 package, so two syntheses of the same construct graph can be
compared by hash regardless of indentation or dict insertion order.

NaN and Infinity are rejected, not converted. The resolver already refuses
them in property trees; this is the last line before a hash is computed.
"""

from __future__ import annotations

import hashlib
import math
from typing import Any

import rfc8785

# Stored in SynthesisResult so hashes from different schemes are never compared
CANONICAL_VERSION = "sha256-rfc8785-v1"


def _check_finite(data: Any) -> None:
    """Recursively reject non-finite floats.

    Raises:
        ValueError: If data contains NaN or Infinity
    """
    if isinstance(data, float):
        if math.isnan(data) or math.isinf(data):
            raise ValueError(f"Cannot canonicalize non-finite float: {data}")
    elif isinstance(data, dict):
        for value in data.values():
            _check_finite(value)
    elif isinstance(data, list | tuple):
        for value in data:
            _check_finite(value)


def canonical_json(obj: Any) -> str:
    """Produce canonical JSON (no whitespace, sorted keys) per RFC 8785.

    Raises:
        ValueError: If data contains NaN or Infinity
        rfc8785.CanonicalizationError: If data contains non-JSON types
    """
    _check_finite(obj)
    result: bytes = rfc8785.dumps(obj)
    return result.decode("utf-8")


def stable_hash(obj: Any) -> str:
    """SHA-256 hex digest of the canonical JSON of obj."""
    canonical = canonical_json(obj)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()
