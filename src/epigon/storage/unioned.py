"""Unioned cache — a mutable overlay shadowing a read-only fixture base.

Every location is resolved once, overlay first, and the answer is memoized
as a ``LinkRecord`` naming the owning layer. Deleting a base object leaves a
``HoleRecord`` behind so the fixture stays hidden without being touched.
Collection listings are memoized too and dropped whenever a write or delete
lands directly under them.
"""

from __future__ import annotations

import logging
from pathlib import Path

from epigon.exceptions import (
    KindNotPrefixError,
    LocationNotObjectError,
    LocationNotPrefixError,
    ObjectNotFoundError,
    PrefixNotFoundError,
    StorageError,
    StorageFailure,
)
from epigon.storage.fixture_store import FixtureStore
from epigon.storage.locations import is_collection, parent_prefix
from epigon.storage.memory_store import MemoryStore
from epigon.storage.protocols import IReadCache, IReadWriteCache
from epigon.storage.records import (
    CollectionRecord,
    HoleRecord,
    Layer,
    LinkRecord,
    Record,
    render_collection,
)

log = logging.getLogger(__name__)


class UnionedCache:
    """Read/write store over an overlay layer stacked on a base layer.

    The cache owns both layers outright; nothing else should mutate them
    once they are wrapped. Object bytes stay in whichever layer produced
    them; the cache's own table holds only links, holes and listings.
    """

    def __init__(self, base: IReadCache, overlay: IReadWriteCache) -> None:
        self._base = base
        self._overlay = overlay
        self._records: dict[str, Record] = {}

    @classmethod
    def from_fixture_dir(cls, fixture_dir: Path, suffix: str = ".json") -> UnionedCache:
        """Stack a fresh ``MemoryStore`` over the fixtures in ``fixture_dir``."""
        return cls(FixtureStore(fixture_dir, suffix=suffix), MemoryStore())

    @property
    def base(self) -> IReadCache:
        return self._base

    @property
    def overlay(self) -> IReadWriteCache:
        return self._overlay

    def clear(self) -> None:
        """Forget everything, including what the base layer has loaded."""
        self._records = {}
        self._base.clear()
        self._overlay.clear()

    def reset(self) -> None:
        """Discard writes, deletes and holes; keep the base layer warm."""
        self._records = {}
        self._overlay.clear()

    def _layer(self, layer: Layer) -> IReadCache:
        match layer:
            case Layer.BASE:
                return self._base
            case Layer.OVERLAY:
                return self._overlay

    def _link(self, layer: Layer, location: str) -> None:
        self._records[location] = LinkRecord(layer, location)

    def _invalidate_parent(self, location: str) -> None:
        parent = parent_prefix(location)
        if parent is not None and self._records.pop(parent, None) is not None:
            log.debug("Invalidated unioned listing %s", parent)

    def _in_base(self, location: str) -> bool:
        # The base layer only reports objects it has already loaded, so probe it.
        if self._base.exists(location):
            return True
        try:
            self._base.read(location)
        except StorageError:
            return False
        return True

    def read(self, location: str) -> bytes:
        if is_collection(location):
            raise LocationNotObjectError(location)

        match self._records.get(location):
            case HoleRecord():
                raise ObjectNotFoundError(location)
            case LinkRecord(layer=layer, location=target):
                return self._layer(layer).read(target)
            case None:
                pass
            case other:
                raise StorageFailure(
                    location, TypeError(f"unexpected {type(other).__name__} for an object location")
                )

        try:
            data = self._overlay.read(location)
        except StorageError:
            data = self._base.read(location)
            self._link(Layer.BASE, location)
        else:
            self._link(Layer.OVERLAY, location)
        return data

    def exists(self, location: str) -> bool:
        match self._records.get(location):
            case LinkRecord():
                return True
            case None:
                pass
            case _:
                return False

        if self._overlay.exists(location):
            self._link(Layer.OVERLAY, location)
        elif self._in_base(location):
            self._link(Layer.BASE, location)
        else:
            return False
        return True

    def list(self, location: str) -> list[str]:
        """Base children first, then overlay children; deleted base objects are skipped."""
        if not is_collection(location):
            raise LocationNotPrefixError(location)

        match self._records.get(location):
            case CollectionRecord(subkeys=subkeys):
                return list(subkeys)
            case None:
                pass
            case _:
                raise KindNotPrefixError(location)

        missing: PrefixNotFoundError | None = None
        try:
            base_keys = self._base.list(location)
        except PrefixNotFoundError as exc:
            missing = exc
            base_keys = []
        overlay_keys = self._overlay.list(location)
        if missing is not None and not overlay_keys:
            raise missing

        subkeys = tuple(
            key for key in [*base_keys, *overlay_keys]
            if not isinstance(self._records.get(key), HoleRecord)
        )
        self._records[location] = CollectionRecord(subkeys)
        return list(subkeys)

    def read_list(self, location: str) -> bytes:
        if not is_collection(location):
            raise LocationNotPrefixError(location)

        match self._records.get(location):
            case CollectionRecord(data=bytes() as data):
                return data
            case CollectionRecord(subkeys=cached):
                subkeys = list(cached)
            case None:
                subkeys = self.list(location)
            case _:
                raise KindNotPrefixError(location)

        data = render_collection([self.read(subkey) for subkey in subkeys])
        self._records[location] = CollectionRecord(tuple(subkeys), data)
        return data

    def write(self, location: str, data: bytes) -> None:
        """Write through to the overlay, which then owns ``location`` even over a base object."""
        if is_collection(location):
            raise LocationNotObjectError(location)

        self._overlay.write(location, data)
        self._link(Layer.OVERLAY, location)
        self._invalidate_parent(location)

    def delete(self, location: str) -> bool:
        if is_collection(location) or not self.exists(location):
            return False

        match self._records[location]:
            case LinkRecord(layer=Layer.BASE):
                self._records[location] = HoleRecord()
                existed = True
                log.debug("Masked base object %s with a hole", location)
            case LinkRecord(layer=Layer.OVERLAY):
                existed = self._overlay.delete(location)
                if self._in_base(location):
                    self._records[location] = HoleRecord()
                else:
                    del self._records[location]
            case _:
                return False

        self._invalidate_parent(location)
        return existed
