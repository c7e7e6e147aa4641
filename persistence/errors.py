from __future__ import annotations


class StoreError(RuntimeError):
    pass


class StoreUnavailable(StoreError):
    """The backing store could not be read or written (network, auth, corrupt document)."""


class ConfigurationError(StoreError):
    pass


class DatasetValidationError(ValueError):
    pass


class UnknownCollection(KeyError):
    pass


class EntityNotFound(LookupError):
    def __init__(self, collection: str, record_id: str):
        super().__init__(f"{collection}/{record_id}")
        self.collection = collection
        self.record_id = record_id
