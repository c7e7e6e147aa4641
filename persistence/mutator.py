"""
In-memory operations over a loaded Dataset.

Nothing here touches the store: callers load, apply one of these, then save.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping

from .dataset import COLLECTIONS, RESERVED_KEYS, Dataset, Record


def utc_timestamp(now: datetime | None = None) -> str:
    """ISO-8601 UTC with millisecond precision and a trailing Z, e.g. 2024-05-01T09:30:00.000Z."""
    dt = now or datetime.now(timezone.utc)
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _matches(record: Any, record_id: str) -> bool:
    return isinstance(record, dict) and record.get("id") == record_id


def replace_whole(dataset: Dataset, collection: str, records: Any) -> bool:
    """Swap in a new array for one collection. Non-arrays leave it untouched."""
    dataset.collection(collection)
    if not isinstance(records, list):
        return False
    setattr(dataset, collection, records)
    return True


def merge_partial(dataset: Dataset, updates: Mapping[str, Any] | None) -> Dataset:
    """
    Document-level merge: each collection supplied as an array replaces the
    stored one wholesale; everything else is kept verbatim.
    """
    if not isinstance(updates, Mapping):
        return dataset
    for name in COLLECTIONS:
        replace_whole(dataset, name, updates.get(name))
    return dataset


def upsert_by_id(
    dataset: Dataset,
    collection: str,
    record_id: str,
    patch: Mapping[str, Any] | None,
    *,
    timestamp: str | None = None,
) -> Record:
    records = dataset.collection(collection)
    fields = {k: v for k, v in (patch or {}).items() if k not in RESERVED_KEYS}
    ts = timestamp or utc_timestamp()

    for index, existing in enumerate(records):
        if _matches(existing, record_id):
            updated = {**existing, **fields, "updatedAt": ts}
            records[index] = updated
            return updated

    created = {"id": record_id, **fields, "createdAt": ts}
    records.append(created)
    return created


def delete_by_id(dataset: Dataset, collection: str, record_id: str) -> bool:
    """
    Remove the record with the given id. Returns False when nothing matched.

    Removing an opportunity also removes every activity pointing at it.
    """
    records = dataset.collection(collection)
    kept = [r for r in records if not _matches(r, record_id)]
    if len(kept) == len(records):
        return False
    setattr(dataset, collection, kept)

    if collection == "opportunities":
        dataset.activities = [
            a for a in dataset.activities if not (isinstance(a, dict) and a.get("opportunityId") == record_id)
        ]
    return True
