"""Resolve store location templates against request path parameters."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from epigon.exceptions import LocateError

_PARAM_RE = re.compile(r":[^/]+")


def locate_resource(template: str, params: Mapping[str, Any]) -> str:
    """Fill every ``:name`` segment of ``template`` from ``params``.

    The template names a location in the store, not an HTTP route::

        >>> locate_resource("root/:childId/nest", {"childId": "child1"})
        'root/child1/nest'

    Raises:
        LocateError: a referenced parameter is missing or empty.
    """
    missing: list[str] = []

    def _substitute(match: re.Match[str]) -> str:
        value = params.get(match.group(0)[1:])
        if not value:
            missing.append(match.group(0))
            return ""
        return str(value)

    location = _PARAM_RE.sub(_substitute, template)
    if missing:
        raise LocateError(f"{missing[0]}: no such path parameter")
    return location


def route_path(path: str) -> str:
    """Translate ``:name`` route segments into FastAPI's ``{name}`` syntax."""
    return _PARAM_RE.sub(lambda match: "{" + match.group(0)[1:] + "}", path)
