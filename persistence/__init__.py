from __future__ import annotations

from .azure_blob_store import AzureBlobDocumentStore
from .dataset import COLLECTIONS, SINGULAR_KEYS, Dataset
from .disk_store import DiskDocumentStore
from .errors import (
    ConfigurationError,
    DatasetValidationError,
    EntityNotFound,
    StoreError,
    StoreUnavailable,
    UnknownCollection,
)
from .factory import store_from_settings
from .interfaces import DocumentStore
from .memory_store import InMemoryDocumentStore
from .repositories import AsyncDatasetRepository, AsyncStoreDatasetRepository

__all__ = [
    "COLLECTIONS",
    "SINGULAR_KEYS",
    "Dataset",
    "DocumentStore",
    "AzureBlobDocumentStore",
    "DiskDocumentStore",
    "InMemoryDocumentStore",
    "AsyncDatasetRepository",
    "AsyncStoreDatasetRepository",
    "store_from_settings",
    "StoreError",
    "StoreUnavailable",
    "ConfigurationError",
    "DatasetValidationError",
    "EntityNotFound",
    "UnknownCollection",
]
