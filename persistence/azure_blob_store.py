from __future__ import annotations

import logging
from typing import Any

from azure.core.exceptions import AzureError, ResourceNotFoundError
from azure.storage.blob import BlobServiceClient, ContainerClient, ContentSettings

from json_store import dump_document, parse_document

from .dataset import Dataset
from .errors import ConfigurationError, StoreUnavailable
from .interfaces import DocumentStore

logger = logging.getLogger(__name__)


class AzureBlobDocumentStore(DocumentStore):
    """
    Keeps the whole dataset in one block blob.

    Every save is an unconditional overwrite (no ETag check), so concurrent
    writers race and the last upload wins.
    """

    def __init__(self, container_client: ContainerClient, blob_name: str):
        self._container = container_client
        self._blob_name = blob_name
        self._blob = container_client.get_blob_client(blob_name)

    @classmethod
    def from_connection_string(
        cls, connection_string: str, container_name: str, blob_name: str
    ) -> "AzureBlobDocumentStore":
        if not connection_string:
            raise ConfigurationError("AZURE_STORAGE_CONNECTION_STRING environment variable is required")
        try:
            service = BlobServiceClient.from_connection_string(connection_string)
        except ValueError as e:
            raise ConfigurationError(f"invalid storage connection string: {e}") from e
        return cls(service.get_container_client(container_name), blob_name)

    @property
    def container_name(self) -> str:
        return self._container.container_name

    @property
    def blob_name(self) -> str:
        return self._blob_name

    def load(self) -> Dataset:
        try:
            raw = self._blob.download_blob().readall()
        except ResourceNotFoundError:
            logger.info("No existing data found, returning empty structure")
            return Dataset.empty()
        except AzureError as e:
            raise StoreUnavailable(_message(e)) from e
        try:
            return Dataset.from_disk_doc(parse_document(raw))
        except ValueError as e:
            # UnicodeDecodeError and JSONDecodeError are both ValueErrors.
            raise StoreUnavailable(f"corrupt document in blob {self._blob_name}: {e}") from e

    def save(self, dataset: Dataset) -> None:
        body = dump_document(dataset.to_disk_doc()).encode("utf-8")
        try:
            self._blob.upload_blob(
                body,
                overwrite=True,
                content_settings=ContentSettings(content_type="application/json"),
            )
        except AzureError as e:
            raise StoreUnavailable(_message(e)) from e

    def ping(self) -> bool:
        try:
            return bool(self._container.exists())
        except AzureError as e:
            raise StoreUnavailable(_message(e)) from e

    def describe(self) -> dict[str, str]:
        return {"container": self.container_name, "blob": self._blob_name}


def _message(exc: Any) -> str:
    # azure-core errors carry a multi-line message; the first line is the useful one.
    text = str(getattr(exc, "message", None) or exc)
    return text.splitlines()[0] if text else type(exc).__name__
