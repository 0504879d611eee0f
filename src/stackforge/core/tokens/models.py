# src/stackforge/core/tokens/models.py
"""Token variants.

A token is an immutable stand-in for a value that is only known at
synthesis time. Each variant implements the same capability interface:

- ``resolve(context)`` returns the token's value in unresolved form. The
  resolver re-resolves that value, so it may contain further tokens.
- ``constituents(context)`` returns the values the token is built from, so
  the reference graph builder can find resource references nested inside.
- ``reference_target`` names the resource a token refers to directly.

Variants: ResourceReference and PseudoReference (references), Intrinsic
(deferred function application) and Lazy (value produced on demand).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from stackforge.contracts.enums import IntrinsicName, PseudoParameter
from stackforge.contracts.errors import ForeignReferenceError
from stackforge.core.tokens.registry import active_registry

if TYPE_CHECKING:
    from stackforge.constructs.resource import Resource
    from stackforge.core.tokens.context import ResolutionContext
    from stackforge.core.tokens.registry import TokenRegistry


class Token(ABC):
    """Base class of all tokens.

    Tokens compare by identity. Converting one to a string registers it in
    the active registry and returns its marker, which is what makes
    ``f"arn:{bucket.arn}/*"`` and ``"a-" + token`` work.
    """

    @property
    @abstractmethod
    def display_hint(self) -> str:
        """Short human-readable name used in markers and error messages."""

    @abstractmethod
    def resolve(self, context: ResolutionContext) -> Any:
        """Produce the token's value (may itself contain tokens)."""

    def constituents(self, context: ResolutionContext) -> Iterable[Any]:
        """Values this token is built from."""
        return ()

    @property
    def reference_target(self) -> Resource | None:
        """Resource this token refers to directly, if any."""
        return None

    def to_string(self, registry: TokenRegistry) -> str:
        """Encode into registry explicitly, without an active session."""
        return registry.encode(self)

    def as_list(self) -> list[str]:
        """Encode a token whose value is a list, as a one-element list marker."""
        return [active_registry().encode_list(self)]

    def __str__(self) -> str:
        return active_registry().encode(self)

    def __add__(self, other: object) -> str:
        if isinstance(other, str | Token):
            return str(self) + str(other)
        return NotImplemented

    def __radd__(self, other: object) -> str:
        if isinstance(other, str):
            return other + str(self)
        return NotImplemented


class ReferenceToken(Token):
    """Marker base for tokens that reference a resource or pseudo-parameter."""


@dataclass(frozen=True, eq=False)
class ResourceReference(ReferenceToken):
    """Reference to a resource (``Ref``) or one of its attributes (``Fn::GetAtt``)."""

    target: Resource
    attribute: str | None = None

    @property
    def display_hint(self) -> str:
        return f"{self.target.node.id}.{self.attribute or 'Ref'}"

    @property
    def reference_target(self) -> Resource:
        return self.target

    def resolve(self, context: ResolutionContext) -> Any:
        if context.scope is not None and self.target.stack is not context.scope:
            raise ForeignReferenceError(
                f"{context.path or '<root>'} in stack '{context.scope.stack_name}' references "
                f"'{self.target.node.path}' which belongs to stack '{self.target.stack.stack_name}'"
            )
        logical_id = self.target.logical_id
        if self.attribute is None:
            return {IntrinsicName.REF.value: logical_id}
        return {IntrinsicName.GET_ATT.value: [logical_id, self.attribute]}


@dataclass(frozen=True, eq=False)
class PseudoReference(ReferenceToken):
    """Reference to a deploy-time pseudo-parameter such as the account id."""

    parameter: PseudoParameter

    @property
    def display_hint(self) -> str:
        return self.parameter.value.replace("::", ".")

    def resolve(self, context: ResolutionContext) -> Any:
        return {IntrinsicName.REF.value: self.parameter.value}


@dataclass(frozen=True, eq=False)
class Intrinsic(Token):
    """Deferred application of an intrinsic function to (possibly tokenized) arguments."""

    name: IntrinsicName
    args: Any

    @property
    def display_hint(self) -> str:
        return self.name.value.replace("::", ".")

    def resolve(self, context: ResolutionContext) -> Any:
        return {self.name.value: self.args}

    def constituents(self, context: ResolutionContext) -> Iterable[Any]:
        return (self.args,)


@runtime_checkable
class Producer(Protocol):
    """Supplies a Lazy token's value when the token is resolved."""

    def produce(self, context: ResolutionContext) -> Any: ...


@dataclass(frozen=True, slots=True)
class _CallableProducer:
    func: Callable[[], Any]

    def produce(self, context: ResolutionContext) -> Any:
        return self.func()


@dataclass(frozen=True, eq=False)
class Lazy(Token):
    """Value computed at resolution time, once the whole construct graph exists.

    The producer is called on every resolution and every reference-graph
    walk, so it must be pure with respect to the construct graph.
    """

    producer: Producer
    hint: str = "Lazy"

    @classmethod
    def of(cls, func: Callable[[], Any], *, hint: str = "Lazy") -> Lazy:
        """Wrap a zero-argument callable as a Lazy token."""
        return cls(_CallableProducer(func), hint=hint)

    @property
    def display_hint(self) -> str:
        return self.hint

    def resolve(self, context: ResolutionContext) -> Any:
        return self.producer.produce(context)

    def constituents(self, context: ResolutionContext) -> Iterable[Any]:
        return (self.producer.produce(context),)
