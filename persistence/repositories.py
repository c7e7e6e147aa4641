from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping, Protocol

from . import mutator
from .dataset import Dataset, Record
from .errors import EntityNotFound
from .interfaces import DocumentStore

logger = logging.getLogger(__name__)


class AsyncDatasetRepository(Protocol):
    """
    Request-level persistence interface.

    Each mutating call is one load, one in-memory change and one save.
    """

    async def get_dataset(self) -> Dataset: ...
    async def replace_dataset(self, doc: Mapping[str, Any]) -> Dataset: ...
    async def merge_dataset(self, updates: Mapping[str, Any] | None) -> Dataset: ...
    async def upsert_record(self, collection: str, record_id: str, patch: Mapping[str, Any] | None) -> Record: ...
    async def delete_record(self, collection: str, record_id: str) -> None: ...
    async def ping(self) -> bool: ...


class AsyncStoreDatasetRepository(AsyncDatasetRepository):
    """
    Wraps a blocking DocumentStore.
    Uses asyncio.to_thread to avoid blocking the event loop on storage I/O.

    There is deliberately no lock around load/save: two requests that
    interleave both write, and the later save is what persists.
    """

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    @property
    def store(self) -> DocumentStore:
        return self._store

    async def _load(self) -> Dataset:
        return await asyncio.to_thread(self._store.load)

    async def _save(self, dataset: Dataset) -> None:
        await asyncio.to_thread(self._store.save, dataset)
        counts = dataset.counts()
        logger.info(
            "Data saved: %d companies, %d opportunities, %d contacts, %d activities",
            counts["companies"],
            counts["opportunities"],
            counts["contacts"],
            counts["activities"],
        )

    async def get_dataset(self) -> Dataset:
        return await self._load()

    async def replace_dataset(self, doc: Mapping[str, Any]) -> Dataset:
        dataset = Dataset.from_disk_doc(doc)
        await self._save(dataset)
        return dataset

    async def merge_dataset(self, updates: Mapping[str, Any] | None) -> Dataset:
        dataset = mutator.merge_partial(await self._load(), updates)
        await self._save(dataset)
        return dataset

    async def upsert_record(self, collection: str, record_id: str, patch: Mapping[str, Any] | None) -> Record:
        dataset = await self._load()
        record = mutator.upsert_by_id(dataset, collection, record_id, patch)
        await self._save(dataset)
        return record

    async def delete_record(self, collection: str, record_id: str) -> None:
        dataset = await self._load()
        if not mutator.delete_by_id(dataset, collection, record_id):
            raise EntityNotFound(collection, record_id)
        await self._save(dataset)

    async def ping(self) -> bool:
        return await asyncio.to_thread(self._store.ping)
