from __future__ import annotations

from typing import Protocol

from .dataset import Dataset


class DocumentStore(Protocol):
    """
    A single JSON document persisted as a whole under one key.

    No conditional writes: the last save wins.
    """

    def load(self) -> Dataset:
        """Load the full document; a missing document loads as an empty Dataset."""
        ...

    def save(self, dataset: Dataset) -> None:
        """Overwrite the persisted document with `dataset`."""
        ...

    def ping(self) -> bool:
        """Cheap connectivity check for health reporting."""
        ...

    def describe(self) -> dict[str, str]:
        """Container/blob labels reported by the health endpoint."""
        ...
