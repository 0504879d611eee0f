# tests/property/__init__.py
"""Property-based tests for stackforge.

Property-based testing validates invariants that must hold for ALL inputs,
not just the specific examples we think of. Synthesis output is hashed and
diffed between runs, so determinism and marker fidelity are non-negotiable.

Test categories:
- core/: Resolution identity, encode/resolve agreement, marker scanning,
  join normalization and synthesis determinism
"""
