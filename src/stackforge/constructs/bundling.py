# src/stackforge/constructs/bundling.py
"""Boundary with the bundling toolchain.

The bundler turns function source into a deployable artifact and reports
where it lives. It is never asked to resolve tokens: any token in the
request (environment values, for example) is passed through untouched and
ends up in the property tree, where the resolver handles it.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from stackforge.constructs.function import Runtime


@dataclass(frozen=True, slots=True)
class ArtifactReference:
    """Location of a bundled artifact.

    Values are ordinary property values (plain strings, or tokens for a
    bucket created in the same stack).
    """

    bucket: Any
    key: Any
    object_version: str | None = None

    def to_code_property(self) -> dict[str, Any]:
        """Render as the ``Code`` property of a function resource."""
        code: dict[str, Any] = {"S3Bucket": self.bucket, "S3Key": self.key}
        if self.object_version is not None:
            code["S3ObjectVersion"] = self.object_version
        return code


@dataclass(frozen=True, slots=True)
class BundlingRequest:
    """What the bundler needs to package one function."""

    entry: Path
    runtime: Runtime
    handler: str
    environment: Mapping[str, Any]


class Bundler(Protocol):
    """Packages function source into a deployable artifact."""

    def bundle(self, request: BundlingRequest) -> ArtifactReference: ...
