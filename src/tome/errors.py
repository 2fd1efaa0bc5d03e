"""Exceptions raised by the content store and slug codec."""


class TomeError(Exception):
    pass


class NotFound(TomeError):
    """A document, revision or slug does not exist."""


class DecodeError(NotFound):
    """A slug that the codec could not have produced."""


class StorageError(TomeError):
    """Durable I/O failed (permissions, disk, missing directory)."""


class StoreTimeout(StorageError):
    """A per-document lock could not be acquired in time."""
