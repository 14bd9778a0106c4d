"""Location classification.

A location ending in ``/`` names a collection; anything else names an object.
"""

from __future__ import annotations

import posixpath


def is_collection(location: str) -> bool:
    return location.endswith("/")


def strip_prefix(location: str) -> str:
    """Drop one trailing ``/`` from a collection location."""
    return location[:-1] if location.endswith("/") else location


def parent_prefix(location: str) -> str | None:
    """Collection location that lists ``location``, or None for a top-level key."""
    parent = posixpath.dirname(location)
    if not parent:
        return None
    return parent + "/"


def child_location(prefix: str, name: str) -> str:
    return posixpath.join(prefix, name)
