from __future__ import annotations

import logging

import pytest
from fastapi.testclient import TestClient


def test_app_smoke_routes(client):
    assert client.get("/api/health").status_code == 200
    assert client.get("/api/data").status_code == 200


def test_spa_fallback_serves_index(settings):
    import app as app_module
    from persistence.memory_store import InMemoryDocumentStore

    settings.static_dir.mkdir(parents=True)
    (settings.static_dir / "index.html").write_text("<html>tracker</html>", encoding="utf-8")
    (settings.static_dir / "app.js").write_text("console.log(1)", encoding="utf-8")

    client = TestClient(app_module.create_app(store=InMemoryDocumentStore(), settings=settings))

    r = client.get("/")
    assert r.status_code == 200
    assert "tracker" in r.text

    r = client.get("/pipeline/board")
    assert "tracker" in r.text

    r = client.get("/app.js")
    assert r.text == "console.log(1)"

    r = client.get("/../secrets.txt")
    assert "tracker" in r.text


def test_unmatched_api_path_is_json_404(client):
    r = client.get("/api/nothing-here")
    assert r.status_code == 404
    assert r.json() == {"error": "Not found"}


def test_missing_static_dir_is_404(client):
    assert client.get("/somewhere").status_code == 404


def test_unhandled_errors_hide_details(settings):
    import app as app_module

    class BrokenStore:
        def load(self):
            raise RuntimeError("secret internals")

        def save(self, dataset):
            raise RuntimeError("secret internals")

        def ping(self):
            return True

        def describe(self):
            return {"container": "c", "blob": "b"}

    client = TestClient(app_module.create_app(store=BrokenStore(), settings=settings), raise_server_exceptions=False)
    r = client.get("/api/data")
    assert r.status_code == 500
    assert r.json() == {"error": "Internal server error"}
    assert "secret" not in r.text


def test_refuses_to_start_without_connection_string(settings):
    import dataclasses

    import app as app_module
    from persistence.errors import ConfigurationError

    azure_settings = dataclasses.replace(settings, storage_backend="azure", connection_string="")
    with pytest.raises(ConfigurationError):
        app_module.create_app(settings=azure_settings)


def test_disk_backend_from_settings(settings):
    import dataclasses

    import app as app_module

    disk_settings = dataclasses.replace(settings, storage_backend="disk")
    with TestClient(app_module.create_app(settings=disk_settings)) as client:
        client.patch("/api/contacts/p1", json={"name": "Ada"})
        assert disk_settings.data_file.exists()
        assert client.get("/api/data").json()["contacts"][0]["name"] == "Ada"


def test_request_logging(settings, caplog):
    import dataclasses

    import app as app_module
    from persistence.memory_store import InMemoryDocumentStore

    verbose = dataclasses.replace(settings, debug_log_requests=True)
    client = TestClient(app_module.create_app(store=InMemoryDocumentStore(), settings=verbose))
    with caplog.at_level(logging.INFO, logger="app"):
        client.get("/api/data")
    assert "GET /api/data" in caplog.text


def test_oversized_body_is_rejected(settings):
    import dataclasses

    import app as app_module
    from persistence.memory_store import InMemoryDocumentStore

    small = dataclasses.replace(settings, max_body_bytes=64)
    store = InMemoryDocumentStore()
    client = TestClient(app_module.create_app(store=store, settings=small))

    r = client.put("/api/data", json={"companies": [{"id": f"c{i}"} for i in range(20)]})
    assert r.status_code == 413
    assert store.stored_text is None


def _body_request(headers: list[tuple[bytes, bytes]], receive, limit: int):
    from types import SimpleNamespace

    from starlette.requests import Request

    app = SimpleNamespace(state=SimpleNamespace(settings=SimpleNamespace(max_body_bytes=limit)))
    scope = {"type": "http", "method": "PUT", "path": "/api/data", "headers": headers, "app": app}
    return Request(scope, receive)


def test_declared_length_over_limit_is_rejected_before_reading():
    import asyncio

    from endpoints.data_endpoints import BodyTooLarge, _read_json_body

    async def receive():
        raise AssertionError("body should not be read")

    request = _body_request([(b"content-length", b"1000")], receive, limit=64)
    with pytest.raises(BodyTooLarge):
        asyncio.run(_read_json_body(request))


def test_streamed_body_stops_once_limit_is_passed():
    import asyncio

    from endpoints.data_endpoints import BodyTooLarge, _read_json_body

    calls = {"n": 0}

    async def receive():
        calls["n"] += 1
        return {"type": "http.request", "body": b"x" * 8, "more_body": True}

    request = _body_request([], receive, limit=10)
    with pytest.raises(BodyTooLarge):
        asyncio.run(_read_json_body(request))
    assert calls["n"] == 2
