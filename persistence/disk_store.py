from __future__ import annotations

import logging
from pathlib import Path

from json_store import atomic_write_text, dump_document, parse_document, read_text

from .dataset import Dataset
from .errors import StoreUnavailable
from .interfaces import DocumentStore

logger = logging.getLogger(__name__)


class DiskDocumentStore(DocumentStore):
    """
    Stores the dataset as a single JSON file (local development backend).

    - Missing file loads as an empty Dataset.
    - Writes atomically.
    """

    def __init__(self, path: Path):
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Dataset:
        try:
            raw = read_text(self._path)
        except OSError as e:
            raise StoreUnavailable(f"cannot read {self._path}: {e}") from e
        if raw is None:
            logger.info("No existing data found at %s, returning empty structure", self._path)
            return Dataset.empty()
        try:
            return Dataset.from_disk_doc(parse_document(raw))
        except ValueError as e:
            raise StoreUnavailable(f"corrupt document at {self._path}: {e}") from e

    def save(self, dataset: Dataset) -> None:
        try:
            atomic_write_text(self._path, dump_document(dataset.to_disk_doc()))
        except OSError as e:
            raise StoreUnavailable(f"cannot write {self._path}: {e}") from e

    def ping(self) -> bool:
        return self._path.parent.is_dir()

    def describe(self) -> dict[str, str]:
        return {"container": str(self._path.parent), "blob": self._path.name}
