# src/stackforge/core/refgraph/__init__.py
"""Reference graph: resource dependencies derived from token usage.

Package re-exports.
"""

from stackforge.core.refgraph.builder import build_reference_graph
from stackforge.core.refgraph.graph import ReferenceGraph
from stackforge.core.refgraph.walker import collect_references

__all__ = [
    "ReferenceGraph",
    "build_reference_graph",
    "collect_references",
]
