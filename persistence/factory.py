from __future__ import annotations

from settings import Settings

from .azure_blob_store import AzureBlobDocumentStore
from .disk_store import DiskDocumentStore
from .interfaces import DocumentStore
from .memory_store import InMemoryDocumentStore


def store_from_settings(settings: Settings) -> DocumentStore:
    backend = settings.storage_backend
    if backend == "disk":
        return DiskDocumentStore(settings.data_file)
    if backend == "memory":
        return InMemoryDocumentStore(container=settings.container_name, blob=settings.blob_name)

    return AzureBlobDocumentStore.from_connection_string(
        settings.connection_string,
        settings.container_name,
        settings.blob_name,
    )
