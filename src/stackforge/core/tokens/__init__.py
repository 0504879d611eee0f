# src/stackforge/core/tokens/__init__.py
"""Tokens: deferred values, their registry and their string encoding.

Package re-exports; see the individual modules for details.
"""

from stackforge.core.tokens.context import ResolutionContext
from stackforge.core.tokens.encoding import (
    MARKER_VERSION,
    Fragment,
    LiteralFragment,
    TokenFragment,
    scan,
    token_ids,
)
from stackforge.core.tokens.fn import Aws, Fn
from stackforge.core.tokens.models import (
    Intrinsic,
    Lazy,
    Producer,
    PseudoReference,
    ReferenceToken,
    ResourceReference,
    Token,
)
from stackforge.core.tokens.registry import TokenRegistry, active_registry, token_session
from stackforge.core.tokens.values import classify, is_unresolved

__all__ = [
    "MARKER_VERSION",
    "Aws",
    "Fn",
    "Fragment",
    "Intrinsic",
    "Lazy",
    "LiteralFragment",
    "Producer",
    "PseudoReference",
    "ReferenceToken",
    "ResolutionContext",
    "ResourceReference",
    "Token",
    "TokenFragment",
    "TokenRegistry",
    "active_registry",
    "classify",
    "is_unresolved",
    "scan",
    "token_ids",
    "token_session",
]
