# src/stackforge/core/refgraph/graph.py
"""ReferenceGraph: resource dependency graph of one stack.

Wraps a NetworkX DiGraph keyed by logical id. An edge ``source -> target``
means the source resource depends on the target. Each edge records the set
of origins that produced it (token reference, explicit ``depends_on``), so
the emitter can tell which dependencies are already implied by a reference.
"""

from __future__ import annotations

from typing import Any

import networkx as nx
import structlog
from networkx import DiGraph

from stackforge.contracts.enums import EdgeOrigin
from stackforge.contracts.errors import ReferenceCycleError
from stackforge.contracts.types import LogicalID

logger = structlog.get_logger(__name__)


class ReferenceGraph:
    """Dependency graph between resources of one stack.

    A cycle is always an error; nothing here tries to break one.
    """

    def __init__(self) -> None:
        self._graph: DiGraph[str] = nx.DiGraph()

    @property
    def node_count(self) -> int:
        """Number of resources in the graph."""
        return self._graph.number_of_nodes()

    @property
    def edge_count(self) -> int:
        """Number of dependency edges."""
        return self._graph.number_of_edges()

    def has_node(self, logical_id: str) -> bool:
        return self._graph.has_node(logical_id)

    def has_edge(self, source: str, target: str) -> bool:
        """Whether source depends on target."""
        return self._graph.has_edge(source, target)

    def get_nx_graph(self) -> DiGraph[str]:
        """Return a frozen copy of the underlying NetworkX graph."""
        return nx.freeze(self._graph.copy())  # type: ignore[no-any-return]

    def add_resource(self, logical_id: LogicalID) -> None:
        self._graph.add_node(logical_id)

    def add_edge(self, source: LogicalID, target: LogicalID, *, origin: EdgeOrigin) -> None:
        """Record that source depends on target.

        Self-edges carry no ordering constraint and are dropped. Adding an
        existing edge merges the origin into it.
        """
        if source == target:
            logger.debug("self_reference_dropped", logical_id=source, origin=origin.value)
            return
        if self._graph.has_edge(source, target):
            self._graph.edges[source, target]["origins"].add(origin)
        else:
            self._graph.add_edge(source, target, origins={origin})

    def origins(self, source: str, target: str) -> frozenset[EdgeOrigin]:
        """Origins recorded for an edge."""
        return frozenset(self._graph.edges[source, target]["origins"])

    def dependencies_of(self, logical_id: str) -> tuple[LogicalID, ...]:
        """Every resource logical_id depends on, sorted."""
        return tuple(sorted(LogicalID(target) for target in self._graph.successors(logical_id)))

    def explicit_only_dependencies(self, logical_id: str) -> tuple[LogicalID, ...]:
        """Dependencies declared explicitly and not implied by any token reference, sorted."""
        return tuple(
            sorted(
                LogicalID(target)
                for target in self._graph.successors(logical_id)
                if EdgeOrigin.REFERENCE not in self._graph.edges[logical_id, target]["origins"]
            )
        )

    def edges(self) -> list[tuple[LogicalID, LogicalID]]:
        """All edges as (source, target), sorted."""
        return sorted((LogicalID(u), LogicalID(v)) for u, v in self._graph.edges())

    def is_acyclic(self) -> bool:
        return nx.is_directed_acyclic_graph(self._graph)

    def validate(self) -> None:
        """Reject cycles.

        The reported cycle is rotated to start at its lexicographically
        smallest logical id so the message is stable across runs.

        Raises:
            ReferenceCycleError: If any cycle exists
        """
        if self.is_acyclic():
            return
        try:
            cycle_edges = nx.find_cycle(self._graph, source=sorted(self._graph.nodes()))
        except nx.NetworkXNoCycle:
            raise ReferenceCycleError([]) from None
        cycle = [edge[0] for edge in cycle_edges]
        start = cycle.index(min(cycle))
        raise ReferenceCycleError(cycle[start:] + cycle[:start])

    def deploy_order(self) -> list[LogicalID]:
        """Logical ids with every dependency before its dependents.

        Ties are broken lexicographically so the order is reproducible.

        Raises:
            ReferenceCycleError: If the graph has cycles
        """
        self.validate()
        reversed_graph = self._graph.reverse(copy=False)
        return [LogicalID(node) for node in nx.lexicographical_topological_sort(reversed_graph)]

    def to_dict(self) -> dict[LogicalID, tuple[LogicalID, ...]]:
        """Adjacency mapping (resource -> sorted dependencies) for every resource."""
        return {LogicalID(node): self.dependencies_of(node) for node in sorted(self._graph.nodes())}

    def describe(self) -> dict[str, Any]:
        """Summary used in log events."""
        return {"resources": self.node_count, "edges": self.edge_count}
