from __future__ import annotations

from pathlib import Path
import sys


import pytest


# Ensure the repository root (parent of ./tests) is importable during pytest collection.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


@pytest.fixture
def settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """
    Settings pointing at the in-memory backend and a temp static dir, so tests
    never need Azure credentials or touch ./data.
    """
    monkeypatch.delenv("AZURE_STORAGE_CONNECTION_STRING", raising=False)
    monkeypatch.setenv("STORAGE_BACKEND", "memory")
    monkeypatch.setenv("STORAGE_CONTAINER_NAME", "data")
    monkeypatch.setenv("STORAGE_BLOB_NAME", "crm-data.json")
    monkeypatch.setenv("STATIC_DIR", str(tmp_path / "public"))
    monkeypatch.setenv("DATA_FILE", str(tmp_path / "data" / "crm-data.json"))
    monkeypatch.setenv("DEBUG_LOG_REQUESTS", "0")

    from settings import get_settings

    return get_settings()


@pytest.fixture
def memory_store():
    from persistence.memory_store import InMemoryDocumentStore

    return InMemoryDocumentStore(container="data", blob="crm-data.json")


@pytest.fixture
def client(settings, memory_store):
    from fastapi.testclient import TestClient

    import app as app_module

    app = app_module.create_app(store=memory_store, settings=settings)
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c
