"""Exception hierarchy for epigon.

Storage failures carry the offending location and an ``ErrorReason`` so
callers can branch on the kind of failure without parsing messages.
"""

from __future__ import annotations

import enum


class EpigonError(Exception):
    """Base exception for all epigon errors."""


class ErrorReason(enum.Enum):
    """Why a storage operation failed."""

    FAILED = "failed"
    LOCATION_NOT_OBJECT = "location does not identify an object"
    LOCATION_NOT_PREFIX = "location does not identify a collection"
    KIND_NOT_OBJECT = "not an object record"
    KIND_NOT_PREFIX = "not a prefix record"
    OBJECT_NOT_FOUND = "no such object record"
    PREFIX_NOT_FOUND = "no such prefix record"


class StorageError(EpigonError):
    """A read/write against a store failed for ``location``.

    The message reads ``<location>: <reason>[: <underlying>]``. Generic
    ``FAILED`` errors that wrap an underlying exception omit the reason text.
    """

    reason: ErrorReason = ErrorReason.FAILED

    def __init__(self, location: str, underlying: BaseException | None = None) -> None:
        self.location = location
        self.underlying = underlying
        super().__init__(self._format())

    def _format(self) -> str:
        message = self.location
        if self.reason is not ErrorReason.FAILED or self.underlying is None:
            message += f": {self.reason.value}"
        if self.underlying is not None:
            message += f": {self.underlying}"
        return message


class StorageFailure(StorageError):
    """Underlying I/O failed, or a memoized record broke an internal invariant."""


class LocationNotObjectError(StorageError):
    """A collection location (trailing ``/``) was used where an object was required."""

    reason = ErrorReason.LOCATION_NOT_OBJECT


class LocationNotPrefixError(StorageError):
    """An object location was used where a collection was required."""

    reason = ErrorReason.LOCATION_NOT_PREFIX


class KindNotObjectError(StorageError):
    """The memoized record at an object location is not an object."""

    reason = ErrorReason.KIND_NOT_OBJECT


class KindNotPrefixError(StorageError):
    """The memoized record at a collection location is not a collection."""

    reason = ErrorReason.KIND_NOT_PREFIX


class ObjectNotFoundError(StorageError):
    reason = ErrorReason.OBJECT_NOT_FOUND


class PrefixNotFoundError(StorageError):
    reason = ErrorReason.PREFIX_NOT_FOUND


class LocateError(EpigonError):
    """A location template referenced a path parameter the request lacks."""


class ResourceConfigError(EpigonError):
    """Resource adapters or routes were registered inconsistently."""


class InvalidResourceError(EpigonError):
    """A request body could not be turned into a storable resource."""


__all__ = [
    "EpigonError",
    "ErrorReason",
    "StorageError",
    "StorageFailure",
    "LocationNotObjectError",
    "LocationNotPrefixError",
    "KindNotObjectError",
    "KindNotPrefixError",
    "ObjectNotFoundError",
    "PrefixNotFoundError",
    "LocateError",
    "ResourceConfigError",
    "InvalidResourceError",
]
