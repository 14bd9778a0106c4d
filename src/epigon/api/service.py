"""Request handlers serving a store as a REST resource tree."""

from __future__ import annotations

import logging
from typing import Awaitable, Callable

from pydantic import ValidationError
from starlette.requests import Request
from starlette.responses import Response

from epigon.api.adapters import ResourceAdapter
from epigon.api.locate import locate_resource
from epigon.exceptions import (
    EpigonError,
    InvalidResourceError,
    LocateError,
    ObjectNotFoundError,
    ResourceConfigError,
)
from epigon.storage.protocols import IReadWriteCache

log = logging.getLogger(__name__)

Handler = Callable[[Request], Awaitable[Response]]
ErrorHandler = Callable[[Request, Exception], Response]

JSON_MEDIA_TYPE = "application/json"


class MockService:
    """Builds handlers that read and write a store at templated locations.

    Every template below names a location in the store, not an HTTP route;
    ``:name`` segments are filled from the matched route's path parameters.
    Storage, template and body failures answer ``error_status`` with the
    error text as body; a ``ValueError`` from an adapter counts as a bad body.
    """

    def __init__(
        self,
        store: IReadWriteCache,
        *,
        error_status: int = 599,
        error_handler: ErrorHandler | None = None,
    ) -> None:
        self._store = store
        self._error_status = error_status
        self._error_handler = error_handler or self.default_error_handler
        self._resources: dict[str, ResourceAdapter] = {}

    def default_error_handler(self, request: Request, exc: Exception) -> Response:
        message = str(exc) or "unexpected error"
        return Response(content=message, status_code=self._error_status, media_type="text/plain")

    def _fail(self, request: Request, exc: Exception) -> Response:
        log.debug("%s %s failed: %s", request.method, request.url.path, exc)
        return self._error_handler(request, exc)

    def adapt(self, template: str, adapter: ResourceAdapter) -> None:
        """Register the adapter used to write resources under ``template``."""
        template = template.rstrip("/")
        if template in self._resources:
            raise ResourceConfigError(f"{template}: resource already configured")
        self._resources[template] = adapter

    def _locate_item(self, template: str, id_param: str, request: Request) -> str:
        resource_id = request.path_params.get(id_param)
        if not resource_id:
            raise LocateError(f":{id_param}: no such path parameter")
        return f"{locate_resource(template, request.path_params)}/{resource_id}"

    def list_handler(self, template: str) -> Handler:
        """Respond with the JSON array of every resource under ``template``."""
        template = template.rstrip("/") + "/"

        async def handle(request: Request) -> Response:
            try:
                location = locate_resource(template, request.path_params)
                data = self._store.read_list(location)
            except EpigonError as exc:
                return self._fail(request, exc)
            return Response(content=data, status_code=200, media_type=JSON_MEDIA_TYPE)

        return handle

    def get_handler(self, template: str, id_param: str) -> Handler:
        """Respond with the resource at ``template/<id_param>``."""
        template = template.rstrip("/")

        async def handle(request: Request) -> Response:
            try:
                data = self._store.read(self._locate_item(template, id_param, request))
            except EpigonError as exc:
                return self._fail(request, exc)
            return Response(content=data, status_code=200, media_type=JSON_MEDIA_TYPE)

        return handle

    def write_handler(self, template: str, empty: bool = False) -> Handler:
        """Store the request body at ``template/<id>``, the id coming from the adapter.

        Responds 200 with the stored bytes, or with no body when ``empty``.
        """
        template = template.rstrip("/")

        async def handle(request: Request) -> Response:
            try:
                adapter = self._resources.get(template)
                if adapter is None:
                    raise ResourceConfigError(f"{template}: no resource adapter configured")
                location = locate_resource(template, request.path_params)
                body = await request.body()
                try:
                    source = adapter.new().model_validate_json(body)
                except ValidationError as exc:
                    raise InvalidResourceError(f"{location}: {exc}") from exc
                try:
                    resource_id, target = adapter.convert(request, source)
                except ValueError as exc:
                    raise InvalidResourceError(f"{location}: {exc}") from exc
                data = target.model_dump_json(exclude_none=True).encode("utf-8")
                self._store.write(f"{location}/{resource_id}", data)
            except EpigonError as exc:
                return self._fail(request, exc)
            if empty:
                return Response(status_code=200)
            return Response(content=data, status_code=200, media_type=JSON_MEDIA_TYPE)

        return handle

    def delete_handler(self, template: str, id_param: str, empty: bool = True) -> Handler:
        """Delete the resource at ``template/<id_param>``.

        Responds 204, or 200 with the deleted bytes unless ``empty``.
        """
        template = template.rstrip("/")

        async def handle(request: Request) -> Response:
            try:
                location = self._locate_item(template, id_param, request)
                data = b"" if empty or not self._store.exists(location) else self._store.read(location)
                if not self._store.delete(location):
                    raise ObjectNotFoundError(location)
            except EpigonError as exc:
                return self._fail(request, exc)
            if empty:
                return Response(status_code=204)
            return Response(content=data, status_code=200, media_type=JSON_MEDIA_TYPE)

        return handle
