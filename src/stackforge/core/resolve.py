# src/stackforge/core/resolve.py
"""Recursive resolution of property trees into template expressions.

Resolution walks four shapes:

- scalar: returned as-is, except strings carrying token markers
- sequence: each element resolved, order preserved
- mapping: each value resolved, keys emitted in lexicographic order
- token: resolved through its own ``resolve``, and the result re-resolved,
  because a token may produce a value that still contains tokens

A string with embedded markers becomes the token's own value when it is
exactly one marker, and an ``Fn::Join`` over its fragments otherwise.
Resolution never mutates the registry and never lets a marker through.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from stackforge.contracts.enums import IntrinsicName, ValueKind
from stackforge.contracts.errors import UnsupportedValueError
from stackforge.core.tokens.context import ResolutionContext
from stackforge.core.tokens.encoding import (
    LiteralFragment,
    TokenFragment,
    contains_marker,
    list_token_ids,
    scan,
    whole_list_token,
)
from stackforge.core.tokens.models import Token
from stackforge.core.tokens.values import classify

_JOIN = IntrinsicName.JOIN.value


def resolve(value: Any, context: ResolutionContext) -> Any:
    """Resolve every token in value.

    Args:
        value: Property tree (scalars, lists/tuples, mappings, tokens)
        context: Registry, scope, cycle chain and path for this pass

    Returns:
        Token-free tree of JSON-compatible values (tuples become lists)

    Raises:
        UnregisteredTokenError: If a marker names an unknown token
        ResolutionCycleError: If a token's resolution reaches itself
        UnsupportedValueError: If the tree holds a non-serializable value
    """
    kind = classify(value, context.path)
    match kind:
        case ValueKind.TOKEN:
            return resolve_token(value, context)
        case ValueKind.SCALAR:
            if isinstance(value, str):
                return _resolve_string(value, context)
            return value
        case ValueKind.SEQUENCE:
            return _resolve_sequence(value, context)
        case ValueKind.MAPPING:
            return _resolve_mapping(value, context)
    raise AssertionError(f"unhandled value kind: {kind}")


def resolve_token(token: Token, context: ResolutionContext) -> Any:
    """Resolve a single token and everything its value contains."""
    inner = context.enter(token)
    return resolve(token.resolve(inner), inner)


def _resolve_sequence(items: Sequence[Any], context: ResolutionContext) -> Any:
    list_token = whole_list_token(items)
    if list_token is not None:
        return resolve_token(context.registry.lookup(list_token), context)
    return [resolve(item, context.child(index)) for index, item in enumerate(items)]


def _resolve_mapping(mapping: Mapping[Any, Any], context: ResolutionContext) -> dict[str, Any]:
    resolved: dict[str, Any] = {}
    for key, item in mapping.items():
        if not isinstance(key, str):
            raise UnsupportedValueError(context.path, key, f"mapping key {key!r} is not a string")
        out_key = key
        if contains_marker(key):
            out_key = _resolve_string(key, context)
            if not isinstance(out_key, str):
                raise UnsupportedValueError(context.path, key, f"mapping key {key!r} contains a token that does not resolve to a string")
        if out_key in resolved:
            raise UnsupportedValueError(context.path, key, f"mapping key {out_key!r} appears twice after resolution")
        resolved[out_key] = resolve(item, context.child(out_key))
    return {key: resolved[key] for key in sorted(resolved)}


def _resolve_string(text: str, context: ResolutionContext) -> Any:
    if list_token_ids(text):
        raise UnsupportedValueError(
            context.path,
            text,
            "an encoded list token was used inside a string; pass the list itself or join it with Fn.join",
        )
    fragments = scan(text)
    if not any(isinstance(fragment, TokenFragment) for fragment in fragments):
        return text

    if len(fragments) == 1 and isinstance(fragments[0], TokenFragment):
        # Whole-value token: keep its native type (lists and mappings stay intact)
        return resolve_token(context.registry.lookup(fragments[0].token_id), context)

    parts: list[Any] = []
    for fragment in fragments:
        match fragment:
            case LiteralFragment(text=literal):
                parts.append(literal)
            case TokenFragment(token_id=token_id):
                value = resolve_token(context.registry.lookup(token_id), context)
                parts.append(_as_join_part(value, context))
    return _join_parts(parts)


def _as_join_part(value: Any, context: ResolutionContext) -> Any:
    """Coerce a resolved token value into something Fn::Join accepts."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int | float):
        return str(value)
    if _is_intrinsic(value):
        return value
    raise UnsupportedValueError(
        context.path,
        value,
        f"a token resolving to {type(value).__name__} cannot be concatenated into a string",
    )


def _is_intrinsic(value: Any) -> bool:
    if not isinstance(value, dict) or len(value) != 1:
        return False
    (name,) = value
    return name == IntrinsicName.REF.value or name.startswith("Fn::")


def _join_parts(parts: list[Any]) -> Any:
    """Build a minimal ``Fn::Join`` with an empty separator.

    Nested empty-separator joins are flattened, adjacent literals merged and
    empty literals dropped. All-literal input collapses to a plain string.
    """
    flattened: list[Any] = []
    for part in parts:
        nested = part.get(_JOIN) if isinstance(part, dict) and len(part) == 1 else None
        if isinstance(nested, list) and len(nested) == 2 and nested[0] == "" and isinstance(nested[1], list):
            flattened.extend(nested[1])
        else:
            flattened.append(part)

    merged: list[Any] = []
    for part in flattened:
        if isinstance(part, str):
            if not part:
                continue
            if merged and isinstance(merged[-1], str):
                merged[-1] += part
                continue
        merged.append(part)

    if all(isinstance(part, str) for part in merged):
        return "".join(merged)
    return {_JOIN: ["", merged]}
