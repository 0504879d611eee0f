# src/stackforge/core/template.py
"""Template emission.

Turns a stack's resources and its validated ReferenceGraph into the final
document::

    {
      "AWSTemplateFormatVersion": "2010-09-09",
      "Description": "...",
      "Resources": {
        "<logical id>": {
          "Type": "...",
          "Properties": {...},
          "DependsOn": [...],
          "DeletionPolicy": "...",
          "UpdateReplacePolicy": "...",
          "Metadata": {...}
        }
      },
      "Outputs": {"<logical id>": {"Value": ..., "Description": ..., "Export": {"Name": ...}}}
    }

Optional keys are present only when they carry something. Policies are
copied through, never invented. ``DependsOn`` lists only the explicit
dependencies that no token reference already implies.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import structlog

from stackforge.contracts.errors import UnsupportedValueError
from stackforge.core.resolve import resolve
from stackforge.core.tokens.context import ResolutionContext

if TYPE_CHECKING:
    from stackforge.constructs.output import Output
    from stackforge.constructs.resource import Resource
    from stackforge.constructs.stack import Stack
    from stackforge.core.refgraph.graph import ReferenceGraph
    from stackforge.core.tokens.registry import TokenRegistry

logger = structlog.get_logger(__name__)


def emit_template(
    stack: Stack,
    graph: ReferenceGraph,
    registry: TokenRegistry,
    *,
    template_format_version: str | None = None,
) -> dict[str, Any]:
    """Resolve every resource and output of stack into a template document.

    Args:
        stack: Stack being synthesized
        graph: Validated reference graph of the stack
        registry: Registry used to decode string-embedded tokens
        template_format_version: Value of AWSTemplateFormatVersion, or None to omit

    Returns:
        Template document with lexicographically ordered keys at every level
    """
    base = ResolutionContext(registry=registry, scope=stack)
    document: dict[str, Any] = {}
    if template_format_version is not None:
        document["AWSTemplateFormatVersion"] = template_format_version
    if stack.description is not None:
        document["Description"] = resolve(stack.description, base.child("Description"))

    resources_context = base.child("Resources")
    resources = stack.resources_by_logical_id()
    document["Resources"] = {
        logical_id: _emit_resource(resources[logical_id], graph, resources_context.child(logical_id))
        for logical_id in sorted(resources)
    }

    outputs = stack.outputs_by_logical_id()
    if outputs:
        outputs_context = base.child("Outputs")
        document["Outputs"] = {
            logical_id: _emit_output(outputs[logical_id], outputs_context.child(logical_id)) for logical_id in sorted(outputs)
        }
    logger.debug("template_emitted", stack=stack.stack_name, resources=len(resources), outputs=len(outputs))
    return {key: document[key] for key in sorted(document)}


def _emit_resource(resource: Resource, graph: ReferenceGraph, context: ResolutionContext) -> dict[str, Any]:
    properties_context = context.child("Properties")
    properties = resolve(resource.render_properties(), properties_context)
    if not isinstance(properties, dict):
        raise UnsupportedValueError(properties_context.path, properties, "resource properties must resolve to a mapping")

    entry: dict[str, Any] = {"Type": resource.resource_type, "Properties": properties}
    depends_on = graph.explicit_only_dependencies(resource.logical_id)
    if depends_on:
        entry["DependsOn"] = list(depends_on)
    if resource.deletion_policy is not None:
        entry["DeletionPolicy"] = resource.deletion_policy.value
    if resource.update_replace_policy is not None:
        entry["UpdateReplacePolicy"] = resource.update_replace_policy.value
    if resource.metadata:
        entry["Metadata"] = resolve(resource.metadata, context.child("Metadata"))
    return {key: entry[key] for key in sorted(entry)}


def _emit_output(output: Output, context: ResolutionContext) -> dict[str, Any]:
    entry: dict[str, Any] = {"Value": resolve(output.value, context.child("Value"))}
    if output.description is not None:
        entry["Description"] = resolve(output.description, context.child("Description"))
    if output.export_name is not None:
        entry["Export"] = {"Name": resolve(output.export_name, context.child("Export").child("Name"))}
    return {key: entry[key] for key in sorted(entry)}


def render_template(document: dict[str, Any], *, indent: int = 1) -> str:
    """Serialize a template document for writing to disk.

    Keys are sorted so identical documents render to identical bytes.
    ``indent=0`` renders a single line.
    """
    text = json.dumps(document, indent=indent or None, sort_keys=True, ensure_ascii=False, allow_nan=False)
    return text + "\n"
