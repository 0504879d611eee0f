# src/stackforge/constructs/construct.py
"""Construct tree.

Every construct has a scope (its parent) and an id unique among its
siblings. The root of the tree is an App; Stacks sit directly below it and
own everything underneath. A construct's path is the '/'-joined ids from
below the root down to itself, e.g. ``MyStack/Api/Handler``.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING

from stackforge.contracts.errors import ConstructError

if TYPE_CHECKING:
    from stackforge.constructs.app import App
    from stackforge.constructs.stack import Stack

PATH_SEPARATOR = "/"


class ConstructNode:
    """Tree bookkeeping of one construct."""

    def __init__(self, host: Construct, scope: Construct | None, id: str) -> None:
        if scope is not None:
            if not id:
                raise ConstructError(f"Only the root construct may have an empty id (scope: '{scope.node.path}')")
            if PATH_SEPARATOR in id:
                raise ConstructError(f"Construct id '{id}' must not contain '{PATH_SEPARATOR}'")
        self.host = host
        self.scope = scope
        self.id = id
        self._children: dict[str, Construct] = {}

    @property
    def path(self) -> str:
        """Path from below the root to this construct."""
        return PATH_SEPARATOR.join(c.node.id for c in self.scopes if c.node.scope is not None)

    @property
    def scopes(self) -> list[Construct]:
        """Ancestors from the root down to (and including) this construct."""
        chain: list[Construct] = []
        current: Construct | None = self.host
        while current is not None:
            chain.append(current)
            current = current.node.scope
        return list(reversed(chain))

    @property
    def root(self) -> Construct:
        return self.scopes[0]

    @property
    def children(self) -> list[Construct]:
        """Direct children in creation order."""
        return list(self._children.values())

    def find_all(self) -> Iterator[Construct]:
        """This construct and all descendants, pre-order, creation order."""
        yield self.host
        for child in self._children.values():
            yield from child.node.find_all()

    def _add_child(self, child: Construct, id: str) -> None:
        if id in self._children:
            raise ConstructError(f"There is already a construct with id '{id}' in '{self.path or '<root>'}'")
        self._children[id] = child


class Construct:
    """Base class of everything in the construct tree."""

    def __init__(self, scope: Construct | None, id: str) -> None:
        self.node = ConstructNode(self, scope, id)
        if scope is not None:
            scope.node._add_child(self, id)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.node.path or '<root>'}>"

    @property
    def stack(self) -> Stack:
        """Nearest enclosing Stack (a Stack is its own stack).

        Raises:
            ConstructError: If the construct is not inside a Stack
        """
        from stackforge.constructs.stack import Stack

        for scope in reversed(self.node.scopes):
            if isinstance(scope, Stack):
                return scope
        raise ConstructError(f"Construct '{self.node.path}' is not defined within a Stack")

    @property
    def app(self) -> App:
        """Root App of the tree.

        Raises:
            ConstructError: If the tree is not rooted at an App
        """
        from stackforge.constructs.app import App

        root = self.node.root
        if not isinstance(root, App):
            raise ConstructError(f"Construct '{self.node.path}' is not part of an App")
        return root
