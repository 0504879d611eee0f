# src/stackforge/core/refgraph/builder.py
"""Construction of a stack's ReferenceGraph.

Runs before any resolution so that reference cycles and cross-stack
references are rejected before the emitter starts producing output.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from stackforge.contracts.enums import EdgeOrigin
from stackforge.contracts.errors import ForeignReferenceError
from stackforge.core.refgraph.graph import ReferenceGraph
from stackforge.core.refgraph.walker import collect_references
from stackforge.core.tokens.context import ResolutionContext

if TYPE_CHECKING:
    from stackforge.constructs.resource import Resource
    from stackforge.constructs.stack import Stack
    from stackforge.core.tokens.registry import TokenRegistry

logger = structlog.get_logger(__name__)


def build_reference_graph(stack: Stack, registry: TokenRegistry) -> ReferenceGraph:
    """Build and validate the dependency graph of stack's resources.

    Edges come from two sources: resource references found in each
    resource's properties and metadata, and explicit ``depends_on``
    declarations (added unconditionally, without token inspection).

    Args:
        stack: Stack whose resources are walked
        registry: Registry used to decode string-embedded tokens

    Returns:
        Validated, acyclic ReferenceGraph

    Raises:
        ForeignReferenceError: If a resource depends on another stack's resource
        ReferenceCycleError: If the dependencies form a cycle
        LogicalIdCollisionError: If two resources share a logical id
    """
    resources = stack.resources_by_logical_id()
    graph = ReferenceGraph()
    for logical_id in resources:
        graph.add_resource(logical_id)

    base = ResolutionContext(registry=registry, scope=stack, path="Resources")
    for logical_id, resource in resources.items():
        context = base.child(logical_id)
        referenced = [
            *collect_references(resource.render_properties(), context.child("Properties")),
            *collect_references(resource.metadata, context.child("Metadata")),
        ]
        for target in referenced:
            _require_same_stack(stack, resource, target)
            graph.add_edge(logical_id, target.logical_id, origin=EdgeOrigin.REFERENCE)
        for target in resource.dependencies:
            _require_same_stack(stack, resource, target)
            graph.add_edge(logical_id, target.logical_id, origin=EdgeOrigin.EXPLICIT)

    graph.validate()
    logger.debug("reference_graph_built", stack=stack.stack_name, **graph.describe())
    return graph


def _require_same_stack(stack: Stack, source: Resource, target: Resource) -> None:
    if target.stack is not stack:
        raise ForeignReferenceError(
            f"Resource '{source.node.path}' in stack '{stack.stack_name}' depends on "
            f"'{target.node.path}' in stack '{target.stack.stack_name}'. Cross-stack references are not supported."
        )
