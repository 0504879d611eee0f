# src/stackforge/constructs/__init__.py
"""Construct model: App, Stack, Resource, Output and the Node.js function construct."""

from stackforge.constructs.app import App
from stackforge.constructs.bundling import ArtifactReference, Bundler, BundlingRequest
from stackforge.constructs.construct import Construct, ConstructNode
from stackforge.constructs.function import (
    NODEJS_18_X,
    NODEJS_20_X,
    NODEJS_22_X,
    PYTHON_3_12,
    NodejsFunction,
    Runtime,
    RuntimeFamily,
)
from stackforge.constructs.logical_ids import LogicalIdStrategy, PathLogicalIds
from stackforge.constructs.output import Output
from stackforge.constructs.resource import Resource
from stackforge.constructs.stack import Stack

__all__ = [
    "NODEJS_18_X",
    "NODEJS_20_X",
    "NODEJS_22_X",
    "PYTHON_3_12",
    "App",
    "ArtifactReference",
    "Bundler",
    "BundlingRequest",
    "Construct",
    "ConstructNode",
    "LogicalIdStrategy",
    "NodejsFunction",
    "Output",
    "PathLogicalIds",
    "Resource",
    "Runtime",
    "RuntimeFamily",
    "Stack",
]
