# src/stackforge/constructs/logical_ids.py
"""Logical id allocation.

A strategy maps a construct's path within its stack to a logical id. It
must be deterministic (same path, same id, every run); uniqueness is
enforced separately by the Stack, which rejects collisions at synthesis.
"""

from __future__ import annotations

import hashlib
import re
from typing import Protocol

from stackforge.contracts.errors import ConstructError
from stackforge.contracts.types import ConstructPath, LogicalID

_NON_ALPHANUMERIC = re.compile(r"[^A-Za-z0-9]")
_VALID_LOGICAL_ID = re.compile(r"[A-Za-z0-9]+")
_HASH_LENGTH = 8

# Path components left out of the human-readable part of an id
_HIDDEN_COMPONENTS = frozenset({"Default", "Resource"})

MAX_LOGICAL_ID_LENGTH = 255


class LogicalIdStrategy(Protocol):
    """Pluggable logical id allocation."""

    def allocate(self, path: ConstructPath) -> LogicalID: ...


def validate_logical_id(logical_id: str) -> LogicalID:
    """Check an explicitly chosen logical id.

    Raises:
        ConstructError: If the id is empty, not alphanumeric or too long
    """
    if not _VALID_LOGICAL_ID.fullmatch(logical_id):
        raise ConstructError(f"Logical id '{logical_id}' must be non-empty and alphanumeric")
    if len(logical_id) > MAX_LOGICAL_ID_LENGTH:
        raise ConstructError(f"Logical id '{logical_id[:32]}...' exceeds {MAX_LOGICAL_ID_LENGTH} characters")
    return LogicalID(logical_id)


class PathLogicalIds:
    """Readable ids derived from the construct path.

    - A construct directly under the stack keeps its id with non-alphanumeric
      characters removed (``Key`` -> ``Key``), when that leaves something.
    - Deeper constructs get the concatenated alphanumeric path components
      (``Default``/``Resource`` components and immediate repeats skipped),
      truncated to fit, followed by 8 upper-case hex characters of a SHA-256
      over the full path. The hash keeps ids distinct when the readable
      parts coincide.
    """

    def __init__(self, max_length: int = MAX_LOGICAL_ID_LENGTH) -> None:
        if not _HASH_LENGTH * 2 <= max_length <= MAX_LOGICAL_ID_LENGTH:
            raise ConstructError(f"max_length must be between {_HASH_LENGTH * 2} and {MAX_LOGICAL_ID_LENGTH}")
        self.max_length = max_length

    def allocate(self, path: ConstructPath) -> LogicalID:
        if not path:
            raise ConstructError("Cannot allocate a logical id for an empty path")

        if len(path) == 1:
            candidate = _NON_ALPHANUMERIC.sub("", path[0])
            if candidate and len(candidate) <= self.max_length:
                return LogicalID(candidate)

        digest = hashlib.sha256("/".join(path).encode("utf-8")).hexdigest()[:_HASH_LENGTH].upper()
        human = "".join(_readable_components(path))[: self.max_length - _HASH_LENGTH]
        return LogicalID(human + digest)


def _readable_components(path: ConstructPath) -> list[str]:
    readable: list[str] = []
    for component in path:
        if component in _HIDDEN_COMPONENTS:
            continue
        cleaned = _NON_ALPHANUMERIC.sub("", component)
        if cleaned and (not readable or readable[-1] != cleaned):
            readable.append(cleaned)
    return readable
