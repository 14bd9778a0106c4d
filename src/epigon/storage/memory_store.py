"""In-memory overlay layer — dict-backed and fully volatile."""

from __future__ import annotations

import logging

from epigon.exceptions import (
    KindNotObjectError,
    KindNotPrefixError,
    LocationNotObjectError,
    LocationNotPrefixError,
    ObjectNotFoundError,
)
from epigon.storage.locations import is_collection, parent_prefix
from epigon.storage.records import CollectionRecord, ObjectRecord, Record, render_collection

log = logging.getLogger(__name__)


class MemoryStore:
    """Holds written objects in a plain dict — nothing touches disk.

    Collection listings are memoized next to the objects and dropped
    whenever a write or delete lands directly under them.
    """

    def __init__(self) -> None:
        self._records: dict[str, Record] = {}

    def clear(self) -> None:
        self._records = {}

    def reset(self) -> None:
        self.clear()

    def _invalidate_parent(self, location: str) -> None:
        parent = parent_prefix(location)
        if parent is not None and self._records.pop(parent, None) is not None:
            log.debug("Invalidated memory listing %s", parent)

    def read(self, location: str) -> bytes:
        if is_collection(location):
            raise LocationNotObjectError(location)

        match self._records.get(location):
            case ObjectRecord(data=data):
                return data
            case None:
                raise ObjectNotFoundError(location)
            case _:
                raise KindNotObjectError(location)

    def exists(self, location: str) -> bool:
        return isinstance(self._records.get(location), ObjectRecord)

    def list(self, location: str) -> list[str]:
        """List objects directly under ``location``; an unknown prefix is simply empty."""
        if not is_collection(location):
            raise LocationNotPrefixError(location)

        match self._records.get(location):
            case CollectionRecord(subkeys=subkeys):
                return list(subkeys)
            case None:
                pass
            case _:
                raise KindNotPrefixError(location)

        subkeys = tuple(
            sorted(
                key
                for key, record in self._records.items()
                if isinstance(record, ObjectRecord) and parent_prefix(key) == location
            )
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
        if is_collection(location):
            raise LocationNotObjectError(location)

        self._records[location] = ObjectRecord(bytes(data))
        self._invalidate_parent(location)
        log.debug("Wrote %s to memory store", location)

    def delete(self, location: str) -> bool:
        if is_collection(location):
            return False

        existed = isinstance(self._records.pop(location, None), ObjectRecord)
        self._invalidate_parent(location)
        return existed
