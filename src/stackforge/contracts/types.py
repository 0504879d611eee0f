# src/stackforge/contracts/types.py
"""Semantic type aliases for compile-time type safety.

NewType creates distinct types that mypy treats as incompatible,
preventing accidental misuse of semantically different string values.
"""

from typing import NewType

LogicalID = NewType("LogicalID", str)
"""Identifier of a resource or output within one template (e.g., 'Bucket83908E77')"""

TokenID = NewType("TokenID", int)
"""Registry-assigned identifier of a token, unique within one registry"""

ConstructPath = tuple[str, ...]
"""Ids from the stack (exclusive) down to a construct (inclusive), e.g. ('Api', 'Handler')"""
