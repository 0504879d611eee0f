# src/stackforge/constructs/resource.py
"""Resource: one entry of the emitted template."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from stackforge.constructs.construct import Construct
from stackforge.constructs.logical_ids import validate_logical_id
from stackforge.contracts.enums import RemovalPolicy
from stackforge.contracts.errors import ConstructError
from stackforge.contracts.types import LogicalID
from stackforge.core.tokens.models import ResourceReference, Token

if TYPE_CHECKING:
    from stackforge.constructs.stack import Stack


def _coerce_policy(policy: RemovalPolicy | str | None, field: str) -> RemovalPolicy | None:
    if policy is None:
        return None
    try:
        return RemovalPolicy(policy)
    except ValueError:
        allowed = ", ".join(p.value for p in RemovalPolicy)
        raise ConstructError(f"Invalid {field} '{policy}'. Allowed: {allowed}") from None


class Resource(Construct):
    """A template resource with an opaque property tree.

    Properties and metadata may contain tokens anywhere, either as token
    objects or embedded in strings. The engine does not know resource
    schemas; the type name and properties are emitted as given.

    Example:
        key = Resource(stack, "Key", type="AWS::KMS::Key", deletion_policy=RemovalPolicy.DELETE)
        bucket = Resource(
            stack,
            "Bucket",
            type="AWS::S3::Bucket",
            properties={"BucketEncryption": {"KMSMasterKeyID": key.get_att("Arn")}},
        )
    """

    def __init__(
        self,
        scope: Construct,
        id: str,
        *,
        type: str,
        properties: Mapping[str, Any] | Token | None = None,
        metadata: Mapping[str, Any] | None = None,
        deletion_policy: RemovalPolicy | str | None = None,
        update_replace_policy: RemovalPolicy | str | None = None,
        depends_on: Iterable[Resource] = (),
    ) -> None:
        if not type:
            raise ConstructError(f"Resource '{id}' needs a type name")
        # Fails before attaching to the tree when scope is not inside a Stack
        self._stack: Stack = scope.stack
        super().__init__(scope, id)
        self.resource_type = type
        self._properties: dict[str, Any] | Token = properties if isinstance(properties, Token) else dict(properties or {})
        self.metadata: dict[str, Any] = dict(metadata or {})
        self.deletion_policy = _coerce_policy(deletion_policy, "deletion policy")
        self.update_replace_policy = _coerce_policy(update_replace_policy, "update-replace policy")
        self._dependencies: dict[int, Resource] = {}
        self._logical_id: LogicalID | None = None
        self._references: dict[str | None, ResourceReference] = {}
        self.add_depends_on(*depends_on)

    @property
    def logical_id(self) -> LogicalID:
        """Logical id, allocated from the construct path on first access and then fixed."""
        if self._logical_id is None:
            self._logical_id = self._stack.allocate_logical_id(self)
        return self._logical_id

    def override_logical_id(self, logical_id: str) -> None:
        """Replace the allocated logical id with an explicit one."""
        self._logical_id = validate_logical_id(logical_id)

    @property
    def ref(self) -> ResourceReference:
        """Token resolving to ``{"Ref": <logical id>}``."""
        return self._reference(None)

    def get_att(self, attribute: str) -> ResourceReference:
        """Token resolving to ``{"Fn::GetAtt": [<logical id>, attribute]}``."""
        if not attribute:
            raise ConstructError(f"Attribute name for '{self.node.path}' must not be empty")
        return self._reference(attribute)

    def _reference(self, attribute: str | None) -> ResourceReference:
        # One token per (resource, attribute) keeps markers stable across calls
        token = self._references.get(attribute)
        if token is None:
            token = ResourceReference(self, attribute)
            self._references[attribute] = token
        return token

    @property
    def properties(self) -> dict[str, Any] | Token:
        return self._properties

    def set_property(self, name: str, value: Any) -> None:
        """Set (or replace) a top-level property."""
        if isinstance(self._properties, Token):
            raise ConstructError(f"Properties of '{self.node.path}' are a token and cannot be edited")
        self._properties[name] = value

    def render_properties(self) -> dict[str, Any] | Token:
        """Unresolved property tree handed to the reference walker and the emitter.

        Subclasses override this to derive properties from state that can
        change after construction.
        """
        return self._properties

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = value

    def apply_removal_policy(self, policy: RemovalPolicy | str) -> None:
        """Set both the deletion and the update-replace policy."""
        coerced = _coerce_policy(policy, "removal policy")
        self.deletion_policy = coerced
        self.update_replace_policy = coerced

    def add_depends_on(self, *targets: Resource) -> None:
        """Declare dependencies that exist without any data reference."""
        for target in targets:
            if not isinstance(target, Resource):
                raise ConstructError(f"'{self.node.path}' can only depend on resources, got {type(target).__name__}")
            self._dependencies.setdefault(id(target), target)

    @property
    def dependencies(self) -> tuple[Resource, ...]:
        """Explicitly declared dependencies in declaration order."""
        return tuple(self._dependencies.values())
