# src/stackforge/constructs/output.py
"""Output: a value published by a stack's template."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from stackforge.constructs.construct import Construct
from stackforge.constructs.logical_ids import validate_logical_id
from stackforge.contracts.types import LogicalID

if TYPE_CHECKING:
    from stackforge.constructs.stack import Stack


class Output(Construct):
    """Template output.

    The value may contain tokens. Outputs are resolved like properties but
    never add edges to the reference graph: they are read after deployment
    and do not order resources.
    """

    def __init__(
        self,
        scope: Construct,
        id: str,
        *,
        value: Any,
        description: str | None = None,
        export_name: Any = None,
    ) -> None:
        self._stack: Stack = scope.stack
        super().__init__(scope, id)
        self.value = value
        self.description = description
        self.export_name = export_name
        self._logical_id: LogicalID | None = None

    @property
    def logical_id(self) -> LogicalID:
        if self._logical_id is None:
            self._logical_id = self._stack.allocate_logical_id(self)
        return self._logical_id

    def override_logical_id(self, logical_id: str) -> None:
        self._logical_id = validate_logical_id(logical_id)
