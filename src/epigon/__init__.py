"""epigon: a fixture-backed mock data store for emulating REST resource trees in tests.

Typical use::

    from epigon import UnionedCache

    store = UnionedCache.from_fixture_dir(Path("tests/fixtures"))
    store.read_list("root/")      # b'[{"name":"baby"},{"name":"kid"}]'
    store.write("root/child3", b'{"name":"new"}')
    store.reset()                 # back to the pristine fixtures
"""

from __future__ import annotations

from epigon.config import AppSettings
from epigon.exceptions import (
    EpigonError,
    ErrorReason,
    LocationNotObjectError,
    LocationNotPrefixError,
    ObjectNotFoundError,
    PrefixNotFoundError,
    StorageError,
)
from epigon.storage import (
    FixtureStore,
    IReadCache,
    IReadWriteCache,
    MemoryStore,
    UnionedCache,
    create_store,
)

__all__ = [
    "AppSettings",
    "create_store",
    "EpigonError",
    "ErrorReason",
    "FixtureStore",
    "IReadCache",
    "IReadWriteCache",
    "LocationNotObjectError",
    "LocationNotPrefixError",
    "MemoryStore",
    "ObjectNotFoundError",
    "PrefixNotFoundError",
    "StorageError",
    "UnionedCache",
]
