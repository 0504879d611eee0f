# src/stackforge/core/refgraph/walker.py
"""Discovery of resource references inside unresolved property trees."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from stackforge.contracts.enums import ValueKind
from stackforge.contracts.errors import UnsupportedValueError
from stackforge.core.tokens.context import ResolutionContext
from stackforge.core.tokens.encoding import contains_marker, list_token_ids, token_ids
from stackforge.core.tokens.models import Token
from stackforge.core.tokens.values import classify

if TYPE_CHECKING:
    from stackforge.constructs.resource import Resource


def collect_references(value: Any, context: ResolutionContext) -> list[Resource]:
    """Resources referenced anywhere inside value, in order of first discovery.

    Reference tokens contribute their target. Intrinsic and lazy tokens are
    walked through their constituents, and strings through the tokens
    encoded in them, so references nested at any depth are found.

    Raises:
        UnregisteredTokenError: If a marker names an unknown token
        ResolutionCycleError: If a token's constituents reach itself
        UnsupportedValueError: If the tree holds a non-serializable value
    """
    found: dict[int, Resource] = {}
    _walk(value, context, found)
    return list(found.values())


def _walk(value: Any, context: ResolutionContext, found: dict[int, Resource]) -> None:
    match classify(value, context.path):
        case ValueKind.TOKEN:
            _walk_token(value, context, found)
        case ValueKind.SCALAR:
            if isinstance(value, str):
                _walk_string(value, context, found)
        case ValueKind.SEQUENCE:
            for index, item in enumerate(value):
                _walk(item, context.child(index), found)
        case ValueKind.MAPPING:
            for key, item in value.items():
                if not isinstance(key, str):
                    raise UnsupportedValueError(context.path, key, f"mapping key {key!r} is not a string")
                if contains_marker(key):
                    _walk_string(key, context, found)
                _walk(item, context.child(key), found)


def _walk_string(text: str, context: ResolutionContext, found: dict[int, Resource]) -> None:
    for token_id in [*token_ids(text), *list_token_ids(text)]:
        _walk_token(context.registry.lookup(token_id), context, found)


def _walk_token(token: Token, context: ResolutionContext, found: dict[int, Resource]) -> None:
    inner = context.enter(token)
    target = token.reference_target
    if target is not None:
        found.setdefault(id(target), target)
    for constituent in token.constituents(inner):
        _walk(constituent, inner, found)
