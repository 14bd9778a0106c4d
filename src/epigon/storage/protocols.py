"""Store protocols — the read/write contract every layer implements."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class IReadCache(Protocol):
    """Read-only store over locations (base layer, or anything read-mostly)."""

    def clear(self) -> None:
        """Drop every memoized record."""
        ...

    def exists(self, location: str) -> bool:
        """Check whether an object is currently known at ``location``. Never raises."""
        ...

    def read(self, location: str) -> bytes:
        """Return object bytes. Raises ``StorageError`` subclasses on failure."""
        ...

    def read_list(self, location: str) -> bytes:
        """Return the JSON-array rendering of every child of a collection."""
        ...

    def list(self, location: str) -> list[str]:
        """Return the immediate child locations of a collection, in order."""
        ...


@runtime_checkable
class IReadWriteCache(IReadCache, Protocol):
    """Mutable store (overlay layer, or the unioned cache)."""

    def reset(self) -> None:
        """Discard everything written since construction or the last reset."""
        ...

    def write(self, location: str, data: bytes) -> None:
        """Store object bytes at ``location``."""
        ...

    def delete(self, location: str) -> bool:
        """Remove the object at ``location``; return whether it existed."""
        ...
