from __future__ import annotations

from typing import Any, Mapping

from pydantic import BaseModel, Field

from .errors import UnknownCollection

COLLECTIONS: tuple[str, ...] = ("companies", "opportunities", "contacts", "activities")

SINGULAR_KEYS: dict[str, str] = {
    "companies": "company",
    "opportunities": "opportunity",
    "contacts": "contact",
    "activities": "activity",
}

# Records are open maps; only these keys are managed by the store.
RESERVED_KEYS = ("id", "createdAt", "updatedAt")


Record = dict[str, Any]


class Dataset(BaseModel):
    """
    Mirrors the persisted blob exactly:
      {
        "companies": [...],
        "opportunities": [...],
        "contacts": [...],
        "activities": [...]
      }
    """

    companies: list[Any] = Field(default_factory=list)
    opportunities: list[Any] = Field(default_factory=list)
    contacts: list[Any] = Field(default_factory=list)
    activities: list[Any] = Field(default_factory=list)

    @classmethod
    def empty(cls) -> "Dataset":
        return cls()

    @classmethod
    def from_disk_doc(cls, doc: Any) -> "Dataset":
        # Anything that is not an array is dropped in favour of [].
        if not isinstance(doc, Mapping):
            return cls()
        return cls.model_validate({name: _as_records(doc.get(name)) for name in COLLECTIONS})

    def to_disk_doc(self) -> dict[str, list[Any]]:
        return {name: self.collection(name) for name in COLLECTIONS}

    def collection(self, name: str) -> list[Any]:
        if name not in COLLECTIONS:
            raise UnknownCollection(name)
        return getattr(self, name)

    def counts(self) -> dict[str, int]:
        return {name: len(self.collection(name)) for name in COLLECTIONS}


def _as_records(value: Any) -> list[Any]:
    if not isinstance(value, list):
        return []
    return value
