"""Fixture-backed base layer — JSON files on the local filesystem, read lazily."""

from __future__ import annotations

import logging
from pathlib import Path

from epigon.exceptions import (
    KindNotObjectError,
    KindNotPrefixError,
    LocationNotObjectError,
    LocationNotPrefixError,
    ObjectNotFoundError,
    PrefixNotFoundError,
    StorageFailure,
)
from epigon.storage.locations import child_location, is_collection, strip_prefix
from epigon.storage.records import CollectionRecord, ObjectRecord, Record, render_collection

log = logging.getLogger(__name__)


class FixtureStore:
    """Read-only view over a directory of ``<location>.json`` fixture files.

    Nothing is read up front: objects and directory listings are loaded on
    first access and memoized until ``clear()``. Fixture files are assumed
    not to change while the store is alive.
    """

    def __init__(self, base_path: Path, suffix: str = ".json") -> None:
        self._base = Path(base_path)
        self._suffix = suffix
        self._records: dict[str, Record] = {}

    @property
    def base_path(self) -> Path:
        return self._base

    def clear(self) -> None:
        self._records = {}

    def _fixture_path(self, location: str, suffix: str = "") -> Path | None:
        """Path of ``location`` inside the fixture tree, or None if it would leave it."""
        relative = strip_prefix(location).lstrip("/")
        if ".." in relative.split("/"):
            return None
        if not relative:
            return self._base
        return self._base / f"{relative}{suffix}"

    def read(self, location: str) -> bytes:
        if is_collection(location):
            raise LocationNotObjectError(location)

        match self._records.get(location):
            case ObjectRecord(data=data):
                return data
            case None:
                pass
            case _:
                raise KindNotObjectError(location)

        path = self._fixture_path(location, self._suffix)
        if path is None:
            raise ObjectNotFoundError(location)
        try:
            data = path.read_bytes()
        except (FileNotFoundError, NotADirectoryError, IsADirectoryError) as exc:
            raise ObjectNotFoundError(location, exc) from exc
        except OSError as exc:
            raise StorageFailure(location, exc) from exc

        log.debug("Loaded fixture %s from %s", location, path)
        self._records[location] = ObjectRecord(data)
        return data

    def exists(self, location: str) -> bool:
        """Report only objects already loaded by ``read``; the filesystem is not probed."""
        return isinstance(self._records.get(location), ObjectRecord)

    def list(self, location: str) -> list[str]:
        if not is_collection(location):
            raise LocationNotPrefixError(location)

        match self._records.get(location):
            case CollectionRecord(subkeys=subkeys):
                return list(subkeys)
            case None:
                pass
            case _:
                raise KindNotPrefixError(location)

        directory = self._fixture_path(location)
        if directory is None:
            raise PrefixNotFoundError(location)
        try:
            entries = sorted(directory.iterdir())
        except (FileNotFoundError, NotADirectoryError) as exc:
            raise PrefixNotFoundError(location, exc) from exc
        except OSError as exc:
            raise StorageFailure(location, exc) from exc

        subkeys = tuple(
            child_location(location, entry.name[: -len(self._suffix)])
            for entry in entries
            if entry.name.endswith(self._suffix) and entry.is_file()
        )
        log.debug("Listed %d fixtures under %s", len(subkeys), location)
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
