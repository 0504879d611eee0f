# src/stackforge/core/synth.py
"""Synthesis: one construct graph in, one template document per stack out.

The pass is synchronous and total. Per stack it:

1. checks logical ids for collisions,
2. builds and validates the reference graph (cycles fail here),
3. resolves and emits the template,
4. hashes the canonical form of the document.

Nothing is written to disk here; ``write_template`` is a separate step so
that a failing stack never leaves partial output behind.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog

from stackforge.contracts.types import LogicalID
from stackforge.core.canonical import CANONICAL_VERSION, stable_hash
from stackforge.core.config import SynthSettings
from stackforge.core.refgraph.builder import build_reference_graph
from stackforge.core.template import emit_template, render_template
from stackforge.core.tokens.registry import token_session

if TYPE_CHECKING:
    from stackforge.constructs.app import App
    from stackforge.constructs.stack import Stack

logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class SynthesisResult:
    """Finished template of one stack plus the information needed to deploy it.

    Attributes:
        stack_name: Deployed name of the stack
        template: Template document (already resolved, token-free)
        dependencies: Resource -> resources it depends on (sorted), for every resource
        deploy_order: Logical ids with dependencies first, ties broken lexicographically
        template_hash: SHA-256 of the RFC 8785 canonical form of template
        hash_version: Hashing scheme of template_hash
    """

    stack_name: str
    template: dict[str, Any]
    dependencies: dict[LogicalID, tuple[LogicalID, ...]]
    deploy_order: tuple[LogicalID, ...]
    template_hash: str
    hash_version: str = CANONICAL_VERSION

    def render(self, *, indent: int = 1) -> str:
        """Template serialized with sorted keys."""
        return render_template(self.template, indent=indent)


def synthesize_stack(stack: Stack, settings: SynthSettings | None = None) -> SynthesisResult:
    """Synthesize a single stack.

    Args:
        stack: Stack to synthesize
        settings: Synthesis settings (defaults to the owning app's settings)

    Raises:
        SynthesisError: Any subclass; synthesis is all-or-nothing
    """
    settings = settings or stack.app.settings
    registry = stack.app.registry
    log = logger.bind(stack=stack.stack_name)
    log.debug("synthesis_started")

    # Lazy producers may stringify tokens, which needs an active session
    with token_session(registry):
        graph = build_reference_graph(stack, registry)
        template = emit_template(
            stack,
            graph,
            registry,
            template_format_version=settings.template_format_version,
        )

    result = SynthesisResult(
        stack_name=stack.stack_name,
        template=template,
        dependencies=graph.to_dict(),
        deploy_order=tuple(graph.deploy_order()),
        template_hash=stable_hash(template),
    )
    log.info(
        "synthesis_completed",
        resources=graph.node_count,
        edges=graph.edge_count,
        template_hash=result.template_hash,
    )
    return result


def synthesize_app(app: App, settings: SynthSettings | None = None) -> list[SynthesisResult]:
    """Synthesize every stack of app, in construct order.

    All stacks are synthesized before any result is returned, so one failing
    stack fails the whole app.
    """
    return [synthesize_stack(stack, settings) for stack in app.stacks]


def write_template(result: SynthesisResult, output_dir: Path, *, indent: int = 1) -> Path:
    """Write result's template to ``<output_dir>/<stack_name>.template.json``."""
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / f"{result.stack_name}.template.json"
    path.write_text(result.render(indent=indent), encoding="utf-8")
    logger.debug("template_written", stack=result.stack_name, path=str(path))
    return path
