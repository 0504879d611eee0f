"""
stackforge: construct graphs in, deployment templates out.

Resources are described as a tree of constructs whose properties may hold
tokens (deferred values). Synthesis resolves the tokens into intrinsic
expressions, derives the dependency graph between resources and emits one
deterministic JSON template per stack.
"""

__version__ = "0.1.0"
