from __future__ import annotations

from dataclasses import dataclass

from json_store import dump_document, parse_document

from .dataset import Dataset
from .errors import StoreUnavailable
from .interfaces import DocumentStore


@dataclass
class InMemoryDocumentStore(DocumentStore):
    """Test double: keeps the serialized document in memory, like a blob would."""

    container: str = "memory"
    blob: str = "crm-data.json"
    stored_text: str | None = None
    failure: str | None = None

    def fail_with(self, message: str | None) -> None:
        """Make every subsequent call raise StoreUnavailable (None clears it)."""
        self.failure = message

    def _check(self) -> None:
        if self.failure is not None:
            raise StoreUnavailable(self.failure)

    def load(self) -> Dataset:
        self._check()
        if self.stored_text is None:
            return Dataset.empty()
        try:
            return Dataset.from_disk_doc(parse_document(self.stored_text))
        except ValueError as e:
            raise StoreUnavailable(f"corrupt document: {e}") from e

    def save(self, dataset: Dataset) -> None:
        self._check()
        # Serialize to mimic a real upload.
        self.stored_text = dump_document(dataset.to_disk_doc())

    def ping(self) -> bool:
        self._check()
        return True

    def describe(self) -> dict[str, str]:
        return {"container": self.container, "blob": self.blob}

    def reset(self) -> None:
        self.stored_text = None
        self.failure = None
