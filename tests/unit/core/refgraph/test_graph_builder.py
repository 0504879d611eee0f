# tests/unit/core/refgraph/test_graph_builder.py
"""Tests for building a stack's reference graph from its resources."""

from __future__ import annotations

from typing import Any

import pytest

from stackforge.constructs import App, Resource, Stack
from stackforge.contracts.enums import EdgeOrigin
from stackforge.contracts.errors import ForeignReferenceError, ReferenceCycleError, ResolutionCycleError
from stackforge.core.refgraph import build_reference_graph, collect_references
from stackforge.core.tokens import Aws, Fn, Lazy, ResolutionContext


def _build(stack: Stack) -> Any:
    return build_reference_graph(stack, stack.app.registry)


class TestReferenceDiscovery:
    """Every way a reference can be embedded produces an edge."""

    def test_direct_token(self, stack: Stack) -> None:
        a = Resource(stack, "A", type="T")
        Resource(stack, "B", type="T", properties={"Target": a.ref})
        graph = _build(stack)
        assert graph.has_edge("B", "A")
        assert not graph.has_edge("A", "B")
        assert graph.origins("B", "A") == frozenset({EdgeOrigin.REFERENCE})

    def test_string_embedded_token(self, stack: Stack) -> None:
        a = Resource(stack, "A", type="T")
        Resource(stack, "B", type="T", properties={"Name": f"prefix-{a.get_att('Name')}"})
        assert _build(stack).has_edge("B", "A")

    def test_token_inside_intrinsic(self, stack: Stack) -> None:
        a = Resource(stack, "A", type="T")
        Resource(stack, "B", type="T", properties={"Arn": Fn.join(":", ["arn", Aws.PARTITION, a.ref])})
        assert _build(stack).has_edge("B", "A")

    def test_token_inside_lazy(self, stack: Stack) -> None:
        a = Resource(stack, "A", type="T")
        Resource(stack, "B", type="T", properties={"Deferred": Lazy.of(lambda: [{"X": a.ref}])})
        assert _build(stack).has_edge("B", "A")

    def test_token_inside_list_token(self, stack: Stack) -> None:
        a = Resource(stack, "A", type="T")
        Resource(stack, "B", type="T", properties={"Parts": Fn.split(",", a.ref).as_list()})
        assert _build(stack).has_edge("B", "A")

    def test_token_in_mapping_key(self, stack: Stack) -> None:
        a = Resource(stack, "A", type="T")
        name = Lazy.of(lambda: f"{a.ref}")
        Resource(stack, "B", type="T", properties={f"{name}": 1})
        assert _build(stack).has_edge("B", "A")

    def test_token_in_metadata(self, stack: Stack) -> None:
        a = Resource(stack, "A", type="T")
        Resource(stack, "B", type="T", metadata={"Source": a.get_att("Arn")})
        assert _build(stack).has_edge("B", "A")

    def test_whole_properties_token(self, stack: Stack) -> None:
        a = Resource(stack, "A", type="T")
        Resource(stack, "B", type="T", properties=Lazy.of(lambda: {"Target": a.ref}))
        assert _build(stack).has_edge("B", "A")

    def test_pseudo_references_add_no_edges(self, stack: Stack) -> None:
        Resource(stack, "A", type="T", properties={"Region": Aws.REGION, "Account": f"{Aws.ACCOUNT_ID}"})
        graph = _build(stack)
        assert graph.node_count == 1
        assert graph.edge_count == 0

    def test_collect_references_deduplicates(self, stack: Stack) -> None:
        a = Resource(stack, "A", type="T")
        context = ResolutionContext(registry=stack.app.registry, scope=stack)
        found = collect_references([a.ref, f"{a.get_att('Arn')}", {"k": a.ref}], context)
        assert found == [a]


class TestEdgeRules:
    """Explicit dependencies, self references, cycles and foreign stacks."""

    def test_explicit_dependency(self, stack: Stack) -> None:
        a = Resource(stack, "A", type="T")
        Resource(stack, "B", type="T", depends_on=[a])
        graph = _build(stack)
        assert graph.origins("B", "A") == frozenset({EdgeOrigin.EXPLICIT})
        assert graph.explicit_only_dependencies("B") == ("A",)

    def test_explicit_and_reference_merge(self, stack: Stack) -> None:
        a = Resource(stack, "A", type="T")
        b = Resource(stack, "B", type="T", properties={"Target": a.ref})
        b.add_depends_on(a)
        graph = _build(stack)
        assert graph.origins("B", "A") == frozenset({EdgeOrigin.REFERENCE, EdgeOrigin.EXPLICIT})
        assert graph.explicit_only_dependencies("B") == ()

    def test_self_reference_dropped(self, stack: Stack) -> None:
        a = Resource(stack, "A", type="T")
        a.set_property("Self", a.ref)
        a.add_depends_on(a)
        graph = _build(stack)
        assert graph.edge_count == 0

    def test_reference_cycle(self, stack: Stack) -> None:
        a = Resource(stack, "A", type="T")
        b = Resource(stack, "B", type="T")
        c = Resource(stack, "C", type="T")
        a.set_property("Next", b.ref)
        b.set_property("Next", c.ref)
        c.set_property("Next", a.ref)
        with pytest.raises(ReferenceCycleError) as exc_info:
            _build(stack)
        assert exc_info.value.cycle == ("A", "B", "C")

    def test_cycle_through_explicit_dependency(self, stack: Stack) -> None:
        a = Resource(stack, "A", type="T")
        b = Resource(stack, "B", type="T", properties={"Target": a.ref})
        a.add_depends_on(b)
        with pytest.raises(ReferenceCycleError):
            _build(stack)

    def test_foreign_reference_rejected(self, app: App) -> None:
        first = Stack(app, "First")
        second = Stack(app, "Second")
        a = Resource(first, "A", type="T")
        Resource(second, "B", type="T", properties={"Target": a.ref})
        with pytest.raises(ForeignReferenceError, match="First"):
            _build(second)

    def test_foreign_explicit_dependency_rejected(self, app: App) -> None:
        first = Stack(app, "First")
        second = Stack(app, "Second")
        a = Resource(first, "A", type="T")
        Resource(second, "B", type="T", depends_on=[a])
        with pytest.raises(ForeignReferenceError):
            _build(second)

    def test_self_referencing_lazy_raises_resolution_cycle(self, stack: Stack) -> None:
        holder: dict[str, Any] = {}
        loop = Lazy.of(lambda: {"again": holder["token"]}, hint="Loop")
        holder["token"] = loop
        Resource(stack, "A", type="T", properties={"X": loop})
        with pytest.raises(ResolutionCycleError):
            _build(stack)
