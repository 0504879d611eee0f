"""Shared contracts: type aliases, enums and the synthesis error taxonomy.

Leaf package with no intra-package imports, so every subsystem can depend
on it without creating import cycles.
"""

from stackforge.contracts.enums import (
    EdgeOrigin,
    IntrinsicName,
    PseudoParameter,
    RemovalPolicy,
    ValueKind,
)
from stackforge.contracts.errors import (
    ConstructError,
    ForeignReferenceError,
    LogicalIdCollisionError,
    ReferenceCycleError,
    ResolutionCycleError,
    SynthesisError,
    TokenSessionError,
    UnregisteredTokenError,
    UnsupportedValueError,
)
from stackforge.contracts.types import ConstructPath, LogicalID, TokenID

__all__ = [
    "ConstructError",
    "ConstructPath",
    "EdgeOrigin",
    "ForeignReferenceError",
    "IntrinsicName",
    "LogicalID",
    "LogicalIdCollisionError",
    "PseudoParameter",
    "ReferenceCycleError",
    "RemovalPolicy",
    "ResolutionCycleError",
    "SynthesisError",
    "TokenID",
    "TokenSessionError",
    "UnregisteredTokenError",
    "UnsupportedValueError",
    "ValueKind",
]
