# src/stackforge/contracts/errors.py
"""Synthesis-time exceptions.

Every error here is a pre-deployment failure: none is retried and none is
recoverable mid-pass. Callers (the CLI, orchestration code) halt and surface
the message, which always names the token chain, resource ids or property
path involved. No partial template is ever produced.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any


class SynthesisError(Exception):
    """Base class for all synthesis failures."""


class UnregisteredTokenError(SynthesisError):
    """Raised when a token id has no registry entry.

    Indicates a corrupted or truncated encoded string, or a token string
    carried over from a different registry (another App, another process).

    Attributes:
        token_id: The id that failed lookup
    """

    def __init__(self, token_id: int) -> None:
        self.token_id = token_id
        super().__init__(
            f"Token {token_id} is not registered. The encoded string was corrupted or was produced by a different registry."
        )


class ResolutionCycleError(SynthesisError):
    """Raised when a token's resolution transitively requires itself.

    Attributes:
        chain: Labels of the tokens being resolved, outermost first,
            ending with the token that was reached again.
    """

    def __init__(self, chain: Sequence[str]) -> None:
        self.chain = tuple(chain)
        super().__init__(f"Token resolution cycle: {' -> '.join(self.chain)}")


class ReferenceCycleError(SynthesisError):
    """Raised when resources depend on each other in a cycle.

    Attributes:
        cycle: Logical ids in cycle order (first id depends on the second, ...,
            last depends on the first).
    """

    def __init__(self, cycle: Sequence[str]) -> None:
        self.cycle = tuple(cycle)
        path = " -> ".join([*self.cycle, self.cycle[0]]) if self.cycle else "<unknown>"
        super().__init__(f"Reference cycle between resources: {path}")


class LogicalIdCollisionError(SynthesisError):
    """Raised when two distinct constructs map to the same logical id.

    Attributes:
        logical_id: The contested id
        paths: Construct paths of the colliding constructs
    """

    def __init__(self, logical_id: str, paths: Sequence[str]) -> None:
        self.logical_id = logical_id
        self.paths = tuple(paths)
        super().__init__(f"Logical id '{logical_id}' is used by more than one construct: {', '.join(self.paths)}")


class UnsupportedValueError(SynthesisError):
    """Raised when a property tree holds a value that cannot be emitted.

    Only scalars (None, bool, JSON-safe int, finite float, str), sequences, mappings
    with string keys and tokens are allowed.

    Attributes:
        path: Property path of the offending value (e.g. 'Bucket.Properties.Tags[0]')
        value: The offending value
    """

    def __init__(self, path: str, value: Any, reason: str | None = None) -> None:
        self.path = path
        self.value = value
        detail = reason or f"values of type {type(value).__name__} cannot appear in a template"
        super().__init__(f"Unsupported value at {path or '<root>'}: {detail}")


class ForeignReferenceError(SynthesisError):
    """Raised when a resource references a resource owned by another stack."""


class TokenSessionError(SynthesisError):
    """Raised when a token is stringified without an active registry.

    Stringifying registers the token; open a session with ``with app:`` or
    ``token_session(registry)`` first.
    """


class ConstructError(SynthesisError):
    """Raised for invalid construct tree wiring or construct configuration."""
