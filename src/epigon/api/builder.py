"""Fluent registration of resource routes on a ``MockServer``.

Example::

    server = MockServer()
    services = server.build_service(store)
    services.resource("root", "childId") \\
        .adapt(ModelAdapter(Named, id_field="name")) \\
        .get("root", Action.LIST) \\
        .get("root/:childId", Action.GET) \\
        .post("root", Action.WRITE) \\
        .end()
    service = services.end()
"""

from __future__ import annotations

import dataclasses
import enum
from typing import TYPE_CHECKING

from epigon.api.adapters import (
    ConvertResourceFunc,
    FunctionAdapter,
    NewResourceFunc,
    ResourceAdapter,
)
from epigon.api.service import Handler, MockService
from epigon.exceptions import ResourceConfigError

if TYPE_CHECKING:
    from epigon.api.server import MockServer
    from epigon.storage.protocols import IReadWriteCache


class Action(enum.Enum):
    """Store operation a route performs."""

    LIST = "list"
    GET = "get"
    WRITE = "write"
    DELETE = "delete"


@dataclasses.dataclass(frozen=True)
class ServiceRoute:
    method: str
    path: str
    resource: str
    id_param: str
    action: Action
    empty: bool = False


class ServiceBuilder:
    """Collects resources and routes, then mounts them all in ``end()``."""

    def __init__(self, server: MockServer, root: str, store: IReadWriteCache) -> None:
        self._server = server
        self._root = root
        self._store = store
        self._routes: list[ServiceRoute] = []
        self._resources: dict[str, ResourceAdapter] = {}

    def add_resource(self, template: str, adapter: ResourceAdapter) -> None:
        if template in self._resources:
            raise ResourceConfigError(f"{template}: resource adapter already configured")
        self._resources[template] = adapter

    def adapt_resource(self, template: str, new: NewResourceFunc, convert: ConvertResourceFunc) -> None:
        self.add_resource(template, FunctionAdapter(new, convert))

    def add_routes(self, routes: list[ServiceRoute]) -> None:
        self._routes.extend(routes)

    def resource(self, template: str, id_param: str) -> ResourceBuilder:
        return ResourceBuilder(self, template, id_param)

    def _handler(self, service: MockService, route: ServiceRoute) -> Handler:
        match route.action:
            case Action.LIST:
                return service.list_handler(route.resource)
            case Action.GET:
                return service.get_handler(route.resource, route.id_param)
            case Action.WRITE:
                return service.write_handler(route.resource, route.empty)
            case Action.DELETE:
                return service.delete_handler(route.resource, route.id_param, route.empty)

    def end(self) -> MockService:
        service = MockService(self._store, error_status=self._server.config.error_status)
        for template, adapter in self._resources.items():
            service.adapt(template, adapter)

        for route in self._routes:
            self._server.mount(route.method, self._root + route.path.lstrip("/"), self._handler(service, route))
        return service


class ResourceBuilder:
    """Routes for one resource template; finish with ``end()``."""

    def __init__(self, service: ServiceBuilder, template: str, id_param: str) -> None:
        self._service = service
        self._template = template
        self._id_param = id_param
        self._adapter: ResourceAdapter | None = None
        self._new: NewResourceFunc | None = None
        self._convert: ConvertResourceFunc | None = None
        self._routes: list[ServiceRoute] = []

    def new(self, new: NewResourceFunc) -> ResourceBuilder:
        self._new = new
        self._adapter = None
        return self

    def convert(self, convert: ConvertResourceFunc) -> ResourceBuilder:
        self._convert = convert
        self._adapter = None
        return self

    def adapt(self, adapter: ResourceAdapter) -> ResourceBuilder:
        self._adapter = adapter
        self._new = None
        self._convert = None
        return self

    def route(self, method: str, path: str, id_param: str, action: Action, empty: bool = False) -> ResourceBuilder:
        self._routes.append(
            ServiceRoute(
                method=method,
                path=path,
                resource=self._template,
                id_param=id_param,
                action=action,
                empty=empty,
            )
        )
        return self

    def get(self, path: str, action: Action) -> ResourceBuilder:
        return self.route("GET", path, self._id_param, action)

    def post(self, path: str, action: Action, empty: bool = False) -> ResourceBuilder:
        return self.route("POST", path, self._id_param, action, empty)

    def put(self, path: str, action: Action, empty: bool = False) -> ResourceBuilder:
        return self.route("PUT", path, self._id_param, action, empty)

    def delete(self, path: str, action: Action, empty: bool = True) -> ResourceBuilder:
        return self.route("DELETE", path, self._id_param, action, empty)

    def get_with(self, path: str, id_param: str, action: Action) -> ResourceBuilder:
        return self.route("GET", path, id_param, action)

    def post_with(self, path: str, id_param: str, action: Action, empty: bool = False) -> ResourceBuilder:
        return self.route("POST", path, id_param, action, empty)

    def put_with(self, path: str, id_param: str, action: Action, empty: bool = False) -> ResourceBuilder:
        return self.route("PUT", path, id_param, action, empty)

    def delete_with(self, path: str, id_param: str, action: Action, empty: bool = True) -> ResourceBuilder:
        return self.route("DELETE", path, id_param, action, empty)

    def end(self) -> None:
        """Register the adapter and hand the routes to the service builder.

        Routes are handed over even when the adapter is misconfigured.
        """
        routes, self._routes = self._routes, []
        self._service.add_routes(routes)

        if self._adapter is not None:
            self._service.add_resource(self._template, self._adapter)
        elif self._new is not None or self._convert is not None:
            if self._new is None:
                raise ResourceConfigError(f"{self._template}: missing new() handler")
            if self._convert is None:
                raise ResourceConfigError(f"{self._template}: missing convert() handler")
            self._service.adapt_resource(self._template, self._new, self._convert)
