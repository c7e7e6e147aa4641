from __future__ import annotations

from persistence.dataset import COLLECTIONS, SINGULAR_KEYS, Dataset


def test_empty_dataset_has_all_four_collections():
    assert Dataset.empty().to_disk_doc() == {
        "companies": [],
        "opportunities": [],
        "contacts": [],
        "activities": [],
    }


def test_from_disk_doc_defaults_missing_and_non_array_fields():
    ds = Dataset.from_disk_doc({"companies": [{"id": "c1"}], "contacts": {"id": "x"}, "extra": [1]})
    assert ds.to_disk_doc() == {
        "companies": [{"id": "c1"}],
        "opportunities": [],
        "contacts": [],
        "activities": [],
    }


def test_from_disk_doc_non_mapping_is_empty():
    assert Dataset.from_disk_doc(["not", "a", "doc"]).counts() == {name: 0 for name in COLLECTIONS}


def test_to_disk_doc_key_order_is_canonical():
    ds = Dataset.from_disk_doc({"activities": [], "contacts": [], "companies": [], "opportunities": []})
    assert list(ds.to_disk_doc()) == ["companies", "opportunities", "contacts", "activities"]


def test_singular_keys_cover_every_collection():
    assert set(SINGULAR_KEYS) == set(COLLECTIONS)
    assert SINGULAR_KEYS["activities"] == "activity"
