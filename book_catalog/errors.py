"""
Error taxonomy for the catalog.

Catalog errors carry the transport status they map to, so the RPC facade
can translate them without knowing which operation raised them.
Collaborator failures have their own types: ``RecordStoreError`` for the
durable store and ``CacheError`` for cache backends.
"""

from enum import Enum


class StatusCode(Enum):
    """Transport-level status codes."""
    OK = "OK"
    NOT_FOUND = "NOT_FOUND"
    ALREADY_EXISTS = "ALREADY_EXISTS"
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    INTERNAL = "INTERNAL"


class CatalogError(Exception):
    """Base class for failures surfaced to callers of ``BookCatalog``."""

    status = StatusCode.INTERNAL

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFoundError(CatalogError):
    """The requested id is absent from the durable sequence."""

    status = StatusCode.NOT_FOUND


class AlreadyExistsError(CatalogError):
    """A create asked for an id that is already taken."""

    status = StatusCode.ALREADY_EXISTS


class InternalError(CatalogError):
    """The durable store could not be read or written."""

    status = StatusCode.INTERNAL


class RecordStoreError(OSError):
    """Loading or persisting the record sequence failed."""


class CacheError(Exception):
    """A cache backend operation failed."""
