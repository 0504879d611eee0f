# src/stackforge/core/tokens/context.py
"""Ambient state threaded through a resolution pass."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from stackforge.contracts.errors import ResolutionCycleError

if TYPE_CHECKING:
    from stackforge.constructs.stack import Stack
    from stackforge.core.tokens.models import Token
    from stackforge.core.tokens.registry import TokenRegistry


@dataclass(frozen=True, slots=True)
class ResolutionContext:
    """Immutable resolution state; every descent returns a new context.

    Attributes:
        registry: Registry used to look up string-encoded tokens
        scope: Stack doing the resolving (None for free-standing resolution)
        chain: Tokens currently being resolved, outermost first
        path: Property path of the value being resolved, for error messages
    """

    registry: TokenRegistry
    scope: Stack | None = None
    chain: tuple[Token, ...] = ()
    path: str = ""

    def child(self, segment: str | int) -> ResolutionContext:
        """Context for a mapping key (str) or sequence index (int) below this one."""
        if isinstance(segment, int):
            return replace(self, path=f"{self.path}[{segment}]")
        return replace(self, path=f"{self.path}.{segment}" if self.path else segment)

    def enter(self, token: Token) -> ResolutionContext:
        """Context for resolving token, rejecting tokens already on the chain.

        Identity, not equality, decides membership: two equal-looking tokens
        are still distinct deferred values.

        Raises:
            ResolutionCycleError: If token is already being resolved
        """
        if any(active is token for active in self.chain):
            labels = [self.registry.label(active) for active in self.chain]
            labels.append(self.registry.label(token))
            raise ResolutionCycleError(labels)
        return replace(self, chain=(*self.chain, token))
