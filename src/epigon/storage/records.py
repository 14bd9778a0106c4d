"""Cache slot variants shared by every store."""

from __future__ import annotations

import dataclasses
import enum
from collections.abc import Iterable
from typing import Union


class Layer(enum.Enum):
    """Backing layer a ``LinkRecord`` points into."""

    BASE = "base"
    OVERLAY = "overlay"


@dataclasses.dataclass(frozen=True)
class ObjectRecord:
    """A cached object payload."""

    data: bytes


@dataclasses.dataclass(frozen=True)
class CollectionRecord:
    """Immediate children of a prefix, plus their JSON-array rendering once built."""

    subkeys: tuple[str, ...]
    data: bytes | None = None


@dataclasses.dataclass(frozen=True)
class LinkRecord:
    """Names the layer that currently owns the object at ``location``."""

    layer: Layer
    location: str


@dataclasses.dataclass(frozen=True)
class HoleRecord:
    """Tombstone masking a base-layer object as deleted."""


Record = Union[ObjectRecord, CollectionRecord, LinkRecord, HoleRecord]


def render_collection(payloads: Iterable[bytes]) -> bytes:
    """Join object payloads into a JSON array; no payloads renders as ``[]``."""
    return b"[" + b",".join(payloads) + b"]"
