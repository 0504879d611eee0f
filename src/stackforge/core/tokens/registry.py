# src/stackforge/core/tokens/registry.py
"""Token registry: the table behind string-encoded tokens.

A registry is owned by an App and lives as long as it does. Entries are
only ever added: removing one would invalidate marker strings that were
already embedded in property values.

Stringifying a token (``str(token)``, f-strings, ``+``) needs a registry
without one being passed explicitly, so the registry of the current session
is bound in a context variable. ``with app:`` opens such a session;
``token_session(registry)`` does the same for a bare registry.
"""

from __future__ import annotations

import itertools
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING

from stackforge.contracts.errors import TokenSessionError, UnregisteredTokenError
from stackforge.contracts.types import TokenID
from stackforge.core.tokens.encoding import encode_list, encode_string

if TYPE_CHECKING:
    from stackforge.core.tokens.models import Token

_active_registry: ContextVar[TokenRegistry | None] = ContextVar("stackforge_active_registry", default=None)


class TokenRegistry:
    """Append-only mapping between token ids and tokens.

    Registration is idempotent per token object. Access is serialized with a
    lock because lazy producers may create and register tokens while a
    resolution pass is running.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counter = itertools.count(1)
        self._tokens: dict[TokenID, Token] = {}
        # Keyed by id(token); safe because _tokens keeps every token alive.
        self._ids: dict[int, TokenID] = {}

    def __len__(self) -> int:
        return len(self._tokens)

    def register(self, token: Token) -> TokenID:
        """Register a token, returning its id (the existing id if already registered)."""
        with self._lock:
            existing = self._ids.get(id(token))
            if existing is not None:
                return existing
            token_id = TokenID(next(self._counter))
            self._tokens[token_id] = token
            self._ids[id(token)] = token_id
            return token_id

    def lookup(self, token_id: TokenID) -> Token:
        """Return the token registered under token_id.

        Raises:
            UnregisteredTokenError: If no token has that id
        """
        with self._lock:
            try:
                return self._tokens[token_id]
            except KeyError:
                raise UnregisteredTokenError(token_id) from None

    def id_of(self, token: Token) -> TokenID | None:
        """Id of a token if it has been registered here."""
        with self._lock:
            return self._ids.get(id(token))

    def label(self, token: Token) -> str:
        """Human-readable label used in error messages (``hint#id``)."""
        token_id = self.id_of(token)
        if token_id is None:
            return token.display_hint
        return f"{token.display_hint}#{token_id}"

    def encode(self, token: Token) -> str:
        """Register token and return its string marker."""
        return encode_string(self.register(token), token.display_hint)

    def encode_list(self, token: Token) -> str:
        """Register token and return its list marker."""
        return encode_list(self.register(token), token.display_hint)


def active_registry() -> TokenRegistry:
    """Registry of the current token session.

    Raises:
        TokenSessionError: If no session is open
    """
    registry = _active_registry.get()
    if registry is None:
        raise TokenSessionError(
            "No active token registry. Build constructs inside 'with app:' (or token_session(registry)) "
            "before converting tokens to strings."
        )
    return registry


@contextmanager
def token_session(registry: TokenRegistry) -> Iterator[TokenRegistry]:
    """Bind registry as the active registry for the duration of the block."""
    reset_token = _active_registry.set(registry)
    try:
        yield registry
    finally:
        _active_registry.reset(reset_token)
