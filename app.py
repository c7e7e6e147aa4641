from __future__ import annotations

import contextlib
import logging
import sys
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    settings = app.state.settings
    labels = app.state.store.describe()
    logger.info(
        "Opportunity Tracker server started: port=%s container=%s blob=%s",
        settings.port,
        labels.get("container"),
        labels.get("blob"),
    )
    yield


def _static_response(static_dir: Path, full_path: str):
    root = static_dir.resolve()
    if full_path:
        candidate = (root / full_path).resolve()
        if candidate.is_relative_to(root) and candidate.is_file():
            return FileResponse(candidate)
    index = root / "index.html"
    if index.is_file():
        return FileResponse(index)
    return JSONResponse({"error": "Not found"}, status_code=404)


def create_app(store=None, settings=None) -> FastAPI:
    """
    Build the API.

    `store` is the DocumentStore every request reads and writes; when omitted
    it is constructed from settings, which raises ConfigurationError if the
    storage credential is missing.
    """
    load_dotenv("local.env")
    load_dotenv()

    from endpoints.data_endpoints import router as data_router
    from persistence import AsyncStoreDatasetRepository, store_from_settings
    from settings import get_settings

    settings = settings or get_settings()
    if store is None:
        store = store_from_settings(settings)

    app = FastAPI(lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store
    app.state.repository = AsyncStoreDatasetRepository(store)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        if settings.debug_log_requests:
            logger.info("%s %s", request.method, request.url.path)
        return await call_next(request)

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse({"error": "Internal server error"}, status_code=500)

    app.include_router(data_router)

    @app.get("/{full_path:path}", include_in_schema=False)
    async def spa_fallback(full_path: str):
        if full_path == "api" or full_path.startswith("api/"):
            return JSONResponse({"error": "Not found"}, status_code=404)
        return _static_response(settings.static_dir, full_path)

    return app


def main() -> None:
    import uvicorn

    from persistence.errors import ConfigurationError

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    try:
        app = create_app()
    except ConfigurationError as e:
        logger.error("ERROR: %s", e)
        sys.exit(1)

    settings = app.state.settings
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
