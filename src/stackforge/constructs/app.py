# src/stackforge/constructs/app.py
"""App: root of a construct tree and owner of its token registry."""

from __future__ import annotations

from contextlib import ExitStack
from types import TracebackType
from typing import TYPE_CHECKING

from stackforge.constructs.construct import Construct
from stackforge.core.config import SynthSettings
from stackforge.core.tokens.registry import TokenRegistry, token_session

if TYPE_CHECKING:
    from stackforge.constructs.stack import Stack
    from stackforge.core.synth import SynthesisResult


class App(Construct):
    """Root construct.

    Each App owns an independent TokenRegistry, so two apps (for example in
    two tests) never share tokens. Its settings bound the logical ids its
    stacks allocate and are the default for ``synthesize``. Use the app as a context manager while
    building constructs so tokens can be embedded in strings::

        with App() as app:
            stack = Stack(app, "Storage")
            key = Resource(stack, "Key", type="AWS::KMS::Key")
            Resource(stack, "Alias", type="AWS::KMS::Alias",
                     properties={"TargetKeyId": f"{key.ref}"})
    """

    def __init__(self, *, registry: TokenRegistry | None = None, settings: SynthSettings | None = None) -> None:
        super().__init__(None, "")
        self.registry = registry or TokenRegistry()
        self.settings = settings or SynthSettings()
        self._sessions: list[ExitStack] = []

    def __enter__(self) -> App:
        session = ExitStack()
        session.enter_context(token_session(self.registry))
        self._sessions.append(session)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self._sessions.pop().close()

    @property
    def stacks(self) -> list[Stack]:
        """Stacks of this app in creation order."""
        from stackforge.constructs.stack import Stack

        return [child for child in self.node.children if isinstance(child, Stack)]

    def synthesize(self, settings: SynthSettings | None = None) -> list[SynthesisResult]:
        """Synthesize every stack (see stackforge.core.synth.synthesize_app).

        Uses the app's own settings unless others are given.
        """
        from stackforge.core.synth import synthesize_app

        return synthesize_app(self, settings or self.settings)
