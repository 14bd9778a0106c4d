"""Mock REST service serving a store as a hierarchical resource tree."""

from __future__ import annotations

from epigon.api.adapters import FunctionAdapter, ModelAdapter, ResourceAdapter
from epigon.api.builder import Action, ResourceBuilder, ServiceBuilder
from epigon.api.locate import locate_resource
from epigon.api.server import MockServer
from epigon.api.service import MockService

__all__ = [
    "Action",
    "FunctionAdapter",
    "locate_resource",
    "MockServer",
    "MockService",
    "ModelAdapter",
    "ResourceAdapter",
    "ResourceBuilder",
    "ServiceBuilder",
]
