"""Layered fixture storage: base fixtures, a memory overlay, and the unioned cache."""

from __future__ import annotations

from typing import TYPE_CHECKING

from epigon.storage.fixture_store import FixtureStore
from epigon.storage.memory_store import MemoryStore
from epigon.storage.protocols import IReadCache, IReadWriteCache
from epigon.storage.records import Layer
from epigon.storage.unioned import UnionedCache

if TYPE_CHECKING:
    from epigon.config import StorageConfig

__all__ = [
    "create_store",
    "FixtureStore",
    "IReadCache",
    "IReadWriteCache",
    "Layer",
    "MemoryStore",
    "UnionedCache",
]


def create_store(settings: object | None = None) -> UnionedCache:
    """Create a unioned cache from settings.

    Args:
        settings: An ``AppSettings`` or ``StorageConfig`` instance.
            If None, ``StorageConfig`` is read from the environment.
    """
    from epigon.config import StorageConfig

    config: StorageConfig | None = getattr(settings, "storage", None)
    if config is None and isinstance(settings, StorageConfig):
        config = settings
    if config is None:
        config = StorageConfig()

    return UnionedCache.from_fixture_dir(config.fixture_dir, suffix=config.fixture_suffix)
