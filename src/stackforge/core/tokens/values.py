# src/stackforge/core/tokens/values.py
"""Classification of property-tree values.

``classify`` is the single place where Python types are inspected; the
resolver and the reference graph walker dispatch on the returned ValueKind.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from stackforge.contracts.enums import ValueKind
from stackforge.contracts.errors import UnsupportedValueError
from stackforge.core.tokens.encoding import contains_marker
from stackforge.core.tokens.models import Token

# RFC 8785 hashes integers as IEEE 754 doubles
MAX_SAFE_INT = 2**53 - 1
MIN_SAFE_INT = -(2**53 - 1)


def classify(value: Any, path: str = "") -> ValueKind:
    """Tag a value as scalar, sequence, mapping or token.

    Args:
        value: Any value found in a property tree
        path: Property path, used only for the error message

    Returns:
        The value's kind

    Raises:
        UnsupportedValueError: For any other type, for NaN/Infinity and for
            integers outside the JSON-safe range
    """
    if isinstance(value, Token):
        return ValueKind.TOKEN
    if value is None or isinstance(value, str | bool):
        return ValueKind.SCALAR
    if isinstance(value, int):
        if not MIN_SAFE_INT <= value <= MAX_SAFE_INT:
            raise UnsupportedValueError(path, value, f"integer {value} is outside the JSON-safe range")
        return ValueKind.SCALAR
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            raise UnsupportedValueError(path, value, f"non-finite float {value!r} cannot be serialized")
        return ValueKind.SCALAR
    if isinstance(value, list | tuple):
        return ValueKind.SEQUENCE
    if isinstance(value, Mapping):
        return ValueKind.MAPPING
    raise UnsupportedValueError(path, value)


def is_unresolved(value: Any) -> bool:
    """Whether a value is a token or a string carrying a token marker.

    Only the top level is inspected; nested containers are not walked.
    """
    if isinstance(value, Token):
        return True
    if isinstance(value, str):
        return contains_marker(value)
    return False
