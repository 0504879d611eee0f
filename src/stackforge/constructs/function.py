# src/stackforge/constructs/function.py
"""Node.js function resource bundled by an external Bundler."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from types import MappingProxyType
from typing import Any

from stackforge.constructs.bundling import Bundler, BundlingRequest
from stackforge.constructs.construct import Construct
from stackforge.constructs.resource import Resource
from stackforge.contracts.errors import ConstructError

_ENTRY_SUFFIXES = frozenset({".js", ".jsx", ".ts", ".tsx"})

CONNECTION_REUSE_VARIABLE = "AWS_NODEJS_CONNECTION_REUSE_ENABLED"


class RuntimeFamily(StrEnum):
    NODEJS = "nodejs"
    PYTHON = "python"
    JAVA = "java"
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class Runtime:
    """Function runtime as named in the template, with its language family."""

    name: str
    family: RuntimeFamily


NODEJS_18_X = Runtime("nodejs18.x", RuntimeFamily.NODEJS)
NODEJS_20_X = Runtime("nodejs20.x", RuntimeFamily.NODEJS)
NODEJS_22_X = Runtime("nodejs22.x", RuntimeFamily.NODEJS)
PYTHON_3_12 = Runtime("python3.12", RuntimeFamily.PYTHON)

DEFAULT_NODEJS_RUNTIME = NODEJS_18_X


def _validate_entry(entry: str | Path) -> Path:
    path = Path(entry)
    if path.suffix not in _ENTRY_SUFFIXES:
        raise ConstructError(f"Only JavaScript or TypeScript entry files are supported, got '{path}'")
    if not path.exists():
        raise ConstructError(f"Cannot find entry file at {path}")
    return path.resolve()


class NodejsFunction(Resource):
    """``AWS::Lambda::Function`` whose code is packaged by a Bundler.

    The bundler is invoked once, at construction. Environment variables can
    be added afterwards; they are rendered into the ``Environment`` property
    at synthesis time and may contain tokens.
    """

    def __init__(
        self,
        scope: Construct,
        id: str,
        *,
        entry: str | Path,
        bundler: Bundler,
        handler: str = "handler",
        runtime: Runtime | None = None,
        role: Any = None,
        environment: dict[str, Any] | None = None,
        aws_sdk_connection_reuse: bool = True,
        memory_size: int | None = None,
        timeout_seconds: int | None = None,
    ) -> None:
        runtime = runtime or DEFAULT_NODEJS_RUNTIME
        if runtime.family is not RuntimeFamily.NODEJS:
            raise ConstructError(f"Only NODEJS runtimes are supported, got '{runtime.name}'")
        entry_path = _validate_entry(entry)

        properties: dict[str, Any] = {
            "Handler": f"index.{handler}",
            "Runtime": runtime.name,
        }
        if role is not None:
            properties["Role"] = role
        if memory_size is not None:
            properties["MemorySize"] = memory_size
        if timeout_seconds is not None:
            properties["Timeout"] = timeout_seconds

        self._environment: dict[str, Any] = dict(environment or {})
        # Placement and id errors surface here, before the bundler does any work
        super().__init__(scope, id, type="AWS::Lambda::Function", properties=properties)
        self.runtime = runtime
        self.entry = entry_path

        artifact = bundler.bundle(
            BundlingRequest(
                entry=entry_path,
                runtime=runtime,
                handler=handler,
                environment=MappingProxyType(dict(self._environment)),
            )
        )
        self.set_property("Code", artifact.to_code_property())

        if aws_sdk_connection_reuse:
            self.add_environment(CONNECTION_REUSE_VARIABLE, "1")

    def add_environment(self, key: str, value: Any) -> NodejsFunction:
        """Add (or replace) an environment variable; value may contain tokens."""
        if not key:
            raise ConstructError(f"Environment variable name for '{self.node.path}' must not be empty")
        self._environment[key] = value
        return self

    @property
    def environment(self) -> MappingProxyType[str, Any]:
        return MappingProxyType(self._environment)

    def render_properties(self) -> dict[str, Any]:
        properties = dict(super().render_properties())  # type: ignore[arg-type]
        if self._environment:
            properties["Environment"] = {"Variables": dict(self._environment)}
        return properties
