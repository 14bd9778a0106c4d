"""FastAPI application hosting mock resource routes."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import FastAPI
from fastapi.exception_handlers import http_exception_handler
from fastapi.testclient import TestClient
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response

from epigon.api.locate import route_path
from epigon.api.routes import health
from epigon.api.service import Handler
from epigon.config import APIConfig

if TYPE_CHECKING:
    from epigon.api.builder import ServiceBuilder
    from epigon.storage.protocols import IReadWriteCache

log = logging.getLogger(__name__)


class MockServer:
    """Owns the FastAPI app that mock services mount their routes on.

    Unmatched requests answer 404 for GET and ``error_status`` otherwise.
    """

    def __init__(self, config: APIConfig | None = None) -> None:
        self.config = config or APIConfig()
        self.app = FastAPI(title=self.config.title, description=self.config.description)
        self.app.state.mock_routes = []
        self.app.include_router(health.router)
        self.app.add_exception_handler(StarletteHTTPException, self._route_not_found)

    async def _route_not_found(self, request: Request, exc: StarletteHTTPException) -> Response:
        if exc.status_code not in (404, 405):
            return await http_exception_handler(request, exc)

        method = request.method
        path = request.url.path
        log.info("%s route not found (%s %s)", self.config.log_prefix, method, path)
        status = 404 if method == "GET" else self.config.error_status
        return PlainTextResponse(f"No route matches {method} {path}", status_code=status)

    def mount(self, method: str, path: str, handler: Handler) -> None:
        """Route ``method path`` (``:name`` params allowed) to ``handler``."""
        self.app.add_route(route_path(path), handler, methods=[method])
        self.app.state.mock_routes.append(f"{method} {path}")
        log.debug("Mounted %s %s", method, path)

    def build_service(self, store: IReadWriteCache, root: str | None = None) -> ServiceBuilder:
        """Start registering resources served from ``store`` below ``root``."""
        from epigon.api.builder import ServiceBuilder

        root = self.config.root if root is None else root
        if not root.endswith("/"):
            root += "/"
        return ServiceBuilder(self, root, store)

    def client(self) -> TestClient:
        """In-process HTTP client bound to the app."""
        return TestClient(self.app)
