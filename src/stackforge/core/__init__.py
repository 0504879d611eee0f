# src/stackforge/core/__init__.py
"""Core engine: tokens, resolution, reference graph, emission, configuration, logging."""

from stackforge.core.canonical import (
    CANONICAL_VERSION,
    canonical_json,
    stable_hash,
)
from stackforge.core.config import (
    LoggingSettings,
    SynthSettings,
    load_settings,
)
from stackforge.core.logging import (
    configure_logging,
    get_logger,
)
from stackforge.core.refgraph import ReferenceGraph, build_reference_graph
from stackforge.core.resolve import resolve
from stackforge.core.synth import (
    SynthesisResult,
    synthesize_app,
    synthesize_stack,
    write_template,
)
from stackforge.core.template import emit_template, render_template

__all__ = [
    "CANONICAL_VERSION",
    "LoggingSettings",
    "ReferenceGraph",
    "SynthSettings",
    "SynthesisResult",
    "build_reference_graph",
    "canonical_json",
    "configure_logging",
    "emit_template",
    "get_logger",
    "load_settings",
    "render_template",
    "resolve",
    "stable_hash",
    "synthesize_app",
    "synthesize_stack",
    "write_template",
]
