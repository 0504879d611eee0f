# src/stackforge/core/tokens/encoding.py
"""String encoding of tokens.

Tokens are embedded in ordinary strings (f-strings, concatenation, file
paths, environment variable values) as marker sequences and recovered by
scanning. Marker grammar, version ``v1``::

    string marker   ${Token[v1.<hint>.<id>]}
    list marker     #{Token[v1.<hint>.<id>]}

``<hint>`` is a display hint restricted to ``[A-Za-z0-9_]`` (possibly empty)
and ``<id>`` is the decimal registry id. None of the marker characters are
escaped by JSON, and two markers concatenated back to back remain two
markers. Text that resembles a marker but does not match the exact grammar
is ordinary literal text.

A list token is encoded as a one-element list holding a list marker, so it
can travel through code that expects ``list[str]``.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, TypeAlias

from stackforge.contracts.types import TokenID

MARKER_VERSION = "v1"

_HINT_UNSAFE = re.compile(r"[^A-Za-z0-9_]")
_STRING_MARKER = re.compile(r"\$\{Token\[v1\.([A-Za-z0-9_]*)\.(\d+)\]\}")
_LIST_MARKER = re.compile(r"#\{Token\[v1\.([A-Za-z0-9_]*)\.(\d+)\]\}")


@dataclass(frozen=True, slots=True)
class LiteralFragment:
    """Literal text between markers."""

    text: str


@dataclass(frozen=True, slots=True)
class TokenFragment:
    """A string marker found in scanned text."""

    token_id: TokenID


Fragment: TypeAlias = LiteralFragment | TokenFragment


def sanitize_hint(hint: str) -> str:
    """Reduce a display hint to the characters the marker grammar allows."""
    return _HINT_UNSAFE.sub("_", hint)


def encode_string(token_id: TokenID, hint: str = "") -> str:
    """Return the string marker for a registered token."""
    return f"${{Token[{MARKER_VERSION}.{sanitize_hint(hint)}.{token_id}]}}"


def encode_list(token_id: TokenID, hint: str = "") -> str:
    """Return the list marker for a registered token (the list's only element)."""
    return f"#{{Token[{MARKER_VERSION}.{sanitize_hint(hint)}.{token_id}]}}"


def scan(text: str) -> list[Fragment]:
    """Split text into literal and token fragments, left to right.

    Empty literals are not emitted, so a string that is exactly one marker
    yields a single TokenFragment and token-free text yields at most one
    LiteralFragment.

    Examples:
        >>> scan("plain")
        [LiteralFragment(text='plain')]
        >>> scan("a-${Token[v1.Key_Arn.3]}-b")
        [LiteralFragment(text='a-'), TokenFragment(token_id=3), LiteralFragment(text='-b')]
    """
    fragments: list[Fragment] = []
    cursor = 0
    for match in _STRING_MARKER.finditer(text):
        if match.start() > cursor:
            fragments.append(LiteralFragment(text[cursor : match.start()]))
        fragments.append(TokenFragment(TokenID(int(match.group(2)))))
        cursor = match.end()
    if cursor < len(text):
        fragments.append(LiteralFragment(text[cursor:]))
    return fragments


def token_ids(text: str) -> list[TokenID]:
    """Ids of every string marker in text, in order of appearance."""
    return [TokenID(int(m.group(2))) for m in _STRING_MARKER.finditer(text)]


def list_token_ids(text: str) -> list[TokenID]:
    """Ids of every list marker in text, in order of appearance."""
    return [TokenID(int(m.group(2))) for m in _LIST_MARKER.finditer(text)]


def contains_marker(text: str) -> bool:
    """Whether text holds any string or list marker."""
    return _STRING_MARKER.search(text) is not None or _LIST_MARKER.search(text) is not None


def whole_string_token(text: str) -> TokenID | None:
    """Id of the token when text is exactly one string marker, else None."""
    match = _STRING_MARKER.fullmatch(text)
    return TokenID(int(match.group(2))) if match else None


def whole_list_token(items: Sequence[Any]) -> TokenID | None:
    """Id of the token when items is exactly ``[<list marker>]``, else None."""
    if len(items) != 1 or not isinstance(items[0], str):
        return None
    match = _LIST_MARKER.fullmatch(items[0])
    return TokenID(int(match.group(2))) if match else None
