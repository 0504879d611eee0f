# src/stackforge/constructs/stack.py
"""Stack: unit of deployment, one template per stack."""

from __future__ import annotations

from collections import defaultdict
from typing import TYPE_CHECKING, Any, Protocol, TypeVar

from stackforge.constructs.construct import Construct, ConstructNode
from stackforge.constructs.logical_ids import LogicalIdStrategy, PathLogicalIds
from stackforge.contracts.errors import ConstructError, LogicalIdCollisionError
from stackforge.contracts.types import LogicalID
from stackforge.core.resolve import resolve
from stackforge.core.tokens.context import ResolutionContext
from stackforge.core.tokens.registry import token_session

if TYPE_CHECKING:
    from stackforge.constructs.app import App
    from stackforge.constructs.output import Output
    from stackforge.constructs.resource import Resource
    from stackforge.core.config import SynthSettings
    from stackforge.core.synth import SynthesisResult


class _HasLogicalId(Protocol):
    @property
    def logical_id(self) -> LogicalID: ...

    node: ConstructNode


class Stack(Construct):
    """A deployable unit; every Resource and Output belongs to exactly one Stack.

    Stacks must be direct children of an App.
    """

    def __init__(
        self,
        scope: App,
        id: str,
        *,
        stack_name: str | None = None,
        description: str | None = None,
        logical_ids: LogicalIdStrategy | None = None,
    ) -> None:
        from stackforge.constructs.app import App

        if not isinstance(scope, App):
            raise ConstructError(f"Stack '{id}' must be created directly inside an App")
        super().__init__(scope, id)
        self.stack_name = stack_name or id
        self.description = description
        self.logical_ids: LogicalIdStrategy = logical_ids or PathLogicalIds(scope.settings.logical_id_max_length)

    @property
    def stack(self) -> Stack:
        return self

    def allocate_logical_id(self, construct: Construct) -> LogicalID:
        """Logical id for a construct of this stack, from its path below the stack."""
        scopes = construct.node.scopes
        if self not in scopes or construct is self:
            raise ConstructError(f"Construct '{construct.node.path}' is not inside stack '{self.stack_name}'")
        path = tuple(scope.node.id for scope in scopes[scopes.index(self) + 1 :])
        return self.logical_ids.allocate(path)

    @property
    def resources(self) -> list[Resource]:
        """Resources of this stack in construct-tree order."""
        from stackforge.constructs.resource import Resource

        return [c for c in self.node.find_all() if isinstance(c, Resource)]

    @property
    def outputs(self) -> list[Output]:
        """Outputs of this stack in construct-tree order."""
        from stackforge.constructs.output import Output

        return [c for c in self.node.find_all() if isinstance(c, Output)]

    def resources_by_logical_id(self) -> dict[LogicalID, Resource]:
        """Resources keyed by logical id.

        Raises:
            LogicalIdCollisionError: If two resources share a logical id
        """
        return _index_by_logical_id(self.resources)

    def outputs_by_logical_id(self) -> dict[LogicalID, Output]:
        """Outputs keyed by logical id.

        Raises:
            LogicalIdCollisionError: If two outputs share a logical id
        """
        return _index_by_logical_id(self.outputs)

    def resolve(self, value: Any) -> Any:
        """Resolve value in the context of this stack (e.g. for tests and previews)."""
        registry = self.app.registry
        with token_session(registry):
            return resolve(value, ResolutionContext(registry=registry, scope=self))

    def synthesize(self, settings: SynthSettings | None = None) -> SynthesisResult:
        """Synthesize this stack (see stackforge.core.synth.synthesize_stack)."""
        from stackforge.core.synth import synthesize_stack

        return synthesize_stack(self, settings)


T = TypeVar("T", bound="_HasLogicalId")


def _index_by_logical_id(constructs: list[T]) -> dict[LogicalID, T]:
    by_id: dict[LogicalID, list[T]] = defaultdict(list)
    for construct in constructs:
        by_id[construct.logical_id].append(construct)
    for logical_id, claimants in by_id.items():
        if len(claimants) > 1:
            raise LogicalIdCollisionError(logical_id, [c.node.path for c in claimants])
    return {logical_id: claimants[0] for logical_id, claimants in by_id.items()}
