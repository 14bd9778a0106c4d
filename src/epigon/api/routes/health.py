"""Health check endpoint listing the mock routes mounted so far."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(request: Request) -> dict[str, Any]:
    """Always 200 while the app is up; ``routes`` shows what ``ServiceBuilder.end()`` mounted."""
    return {"status": "ok", "routes": list(request.app.state.mock_routes)}
