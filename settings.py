from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

STORAGE_BACKENDS = ("azure", "disk", "memory")


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    # Blob storage
    connection_string: str
    container_name: str
    blob_name: str
    storage_backend: str

    # Local development backend
    data_file: Path

    # HTTP
    host: str
    port: int
    static_dir: Path
    max_body_bytes: int

    # Debug
    debug_log_requests: bool


def get_settings() -> Settings:
    connection_string = (os.getenv("AZURE_STORAGE_CONNECTION_STRING") or "").strip()
    container_name = (os.getenv("STORAGE_CONTAINER_NAME") or "data").strip()
    blob_name = (os.getenv("STORAGE_BLOB_NAME") or "crm-data.json").strip()

    storage_backend = (os.getenv("STORAGE_BACKEND") or "azure").strip().lower()
    if storage_backend not in STORAGE_BACKENDS:
        storage_backend = "azure"

    data_file = Path(os.getenv("DATA_FILE") or Path("data") / blob_name)

    host = os.getenv("HOST", "0.0.0.0")
    port = _env_int("PORT", 3000)
    static_dir = Path(os.getenv("STATIC_DIR", "public"))
    # Same ceiling the browser client has always been held to.
    max_body_bytes = _env_int("MAX_BODY_BYTES", 10 * 1024 * 1024)

    debug_log_requests = _env_bool("DEBUG_LOG_REQUESTS", True)

    return Settings(
        connection_string=connection_string,
        container_name=container_name,
        blob_name=blob_name,
        storage_backend=storage_backend,
        data_file=data_file,
        host=host,
        port=port,
        static_dir=static_dir,
        max_body_bytes=max_body_bytes,
        debug_log_requests=debug_log_requests,
    )
