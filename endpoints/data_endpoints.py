from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from json_store import loads_strict
from persistence import COLLECTIONS, SINGULAR_KEYS
from persistence.errors import DatasetValidationError, EntityNotFound, StoreUnavailable
from persistence.mutator import utc_timestamp
from persistence.repositories import AsyncDatasetRepository

router = APIRouter(prefix="/api", tags=["data"])
logger = logging.getLogger(__name__)

DEFAULT_MAX_BODY_BYTES = 10 * 1024 * 1024


class BodyTooLarge(ValueError):
    pass


def get_repository(request: Request) -> AsyncDatasetRepository:
    # Built once in create_app(); never a module global.
    return request.app.state.repository


def _failure(action: str, exc: Exception) -> JSONResponse:
    logger.error("Error %s: %s", action, exc)
    return JSONResponse(
        {"error": f"Failed to {action}", "details": str(exc)},
        status_code=500,
    )


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


async def _read_json_body(request: Request) -> Any | None:
    """
    Parse the request body as JSON.

    Returns None for an empty body. Raises ValueError for malformed JSON and
    BodyTooLarge past the configured limit.
    """
    settings = getattr(request.app.state, "settings", None)
    limit = getattr(settings, "max_body_bytes", DEFAULT_MAX_BODY_BYTES)
    declared = request.headers.get("content-length", "")
    if declared.isdigit() and int(declared) > limit:
        raise BodyTooLarge(f"request body exceeds {limit} bytes")

    chunks: list[bytes] = []
    received = 0
    async for chunk in request.stream():
        received += len(chunk)
        if received > limit:
            raise BodyTooLarge(f"request body exceeds {limit} bytes")
        chunks.append(chunk)

    raw = b"".join(chunks)
    if not raw.strip():
        return None
    return loads_strict(raw)


async def _body_or_error(request: Request) -> tuple[Any | None, JSONResponse | None]:
    try:
        return await _read_json_body(request), None
    except BodyTooLarge:
        return None, _error("Payload too large", 413)
    except ValueError:
        return None, _error("Invalid JSON body", 400)


def _success_counts(counts: dict[str, int]) -> dict[str, Any]:
    return {"success": True, "counts": counts}


# -------------------------------------------------------------------
# Whole-document endpoints
# -------------------------------------------------------------------
@router.get("/data")
async def get_data(repo: AsyncDatasetRepository = Depends(get_repository)):
    try:
        dataset = await repo.get_dataset()
    except StoreUnavailable as e:
        return _failure("read data", e)
    return JSONResponse(dataset.to_disk_doc())


@router.put("/data")
async def put_data(request: Request, repo: AsyncDatasetRepository = Depends(get_repository)):
    body, err = await _body_or_error(request)
    if err is not None:
        return err
    try:
        # Arrays and empty bodies are rejected here rather than saved as an empty dataset.
        if not isinstance(body, dict):
            raise DatasetValidationError("Invalid data format")
        dataset = await repo.replace_dataset(body)
    except DatasetValidationError as e:
        return _error(str(e), 400)
    except StoreUnavailable as e:
        return _failure("write data", e)
    return JSONResponse(_success_counts(dataset.counts()))


@router.patch("/data")
async def patch_data(request: Request, repo: AsyncDatasetRepository = Depends(get_repository)):
    body, err = await _body_or_error(request)
    if err is not None:
        return err
    # Whole-collection replacement, not a per-record merge.
    updates = body if isinstance(body, dict) else {}
    try:
        dataset = await repo.merge_dataset(updates)
    except StoreUnavailable as e:
        return _failure("update data", e)
    return JSONResponse(_success_counts(dataset.counts()))


# -------------------------------------------------------------------
# Per-record endpoints
# -------------------------------------------------------------------
@router.patch("/{collection}/{record_id}")
async def upsert_record(
    collection: str,
    record_id: str,
    request: Request,
    repo: AsyncDatasetRepository = Depends(get_repository),
):
    if collection not in COLLECTIONS:
        return _error("Not found", 404)
    singular = SINGULAR_KEYS[collection]

    body, err = await _body_or_error(request)
    if err is not None:
        return err
    patch = body if isinstance(body, dict) else {}

    try:
        record = await repo.upsert_record(collection, record_id, patch)
    except StoreUnavailable as e:
        return _failure(f"update {singular}", e)
    return JSONResponse({"success": True, singular: record})


@router.delete("/{collection}/{record_id}")
async def delete_record(
    collection: str,
    record_id: str,
    repo: AsyncDatasetRepository = Depends(get_repository),
):
    if collection not in COLLECTIONS:
        return _error("Not found", 404)
    singular = SINGULAR_KEYS[collection]

    try:
        await repo.delete_record(collection, record_id)
    except EntityNotFound:
        return _error(f"{singular.capitalize()} not found", 404)
    except StoreUnavailable as e:
        return _failure(f"delete {singular}", e)
    return JSONResponse({"success": True, "deleted": record_id})


# -------------------------------------------------------------------
# Health & backup
# -------------------------------------------------------------------
@router.get("/health")
async def health(request: Request, repo: AsyncDatasetRepository = Depends(get_repository)):
    labels = request.app.state.store.describe()
    try:
        reachable = await repo.ping()
        error = None if reachable else f"container {labels.get('container')} not found"
    except StoreUnavailable as e:
        error = str(e)

    if error is not None:
        logger.warning("Health check failed: %s", error)
        return JSONResponse(
            {
                "status": "unhealthy",
                "timestamp": utc_timestamp(),
                "storage": "disconnected",
                "error": error,
            },
            status_code=503,
        )

    return JSONResponse(
        {
            "status": "healthy",
            "timestamp": utc_timestamp(),
            "storage": "connected",
            "container": labels.get("container"),
            "blob": labels.get("blob"),
        }
    )


@router.get("/backup")
async def backup(repo: AsyncDatasetRepository = Depends(get_repository)):
    try:
        dataset = await repo.get_dataset()
    except StoreUnavailable as e:
        return _failure("create backup", e)
    day = datetime.now(timezone.utc).date().isoformat()
    return JSONResponse(
        dataset.to_disk_doc(),
        headers={"Content-Disposition": f"attachment; filename=crm-backup-{day}.json"},
    )
