"""tender - household chore tracker keyed by sync code."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from src.core.config import constants, settings
from src.core.db_client import InstanceStore
from src.core.errors import ApiError
from src.core.logging import configure_logfire, instrument_fastapi
from src.interface.api_router import NormalizeApiPathMiddleware
from src.interface.api_router import router as api_router
from src.interface.pwa_router import router as pwa_router


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan context manager."""
    # Startup
    configure_logfire()

    store = InstanceStore(db_path=settings.sqlite_db_path)
    await store.connect()
    app.state.store = store
    logger.info("Database initialized", extra={"db_path": store.db_path})

    try:
        yield
    finally:
        # Shutdown
        await store.close()


app = FastAPI(
    title="tender",
    description="Household chore tracker keyed by sync code",
    version=settings.app_version,
    lifespan=lifespan,
    docs_url=None if settings.is_production else "/docs",
    redoc_url=None if settings.is_production else "/redoc",
)

# Instrument FastAPI with Logfire
instrument_fastapi(app)

app.add_middleware(NormalizeApiPathMiddleware)


@app.exception_handler(ApiError)
async def handle_api_error(request: Request, exc: ApiError) -> JSONResponse:
    """Render handled API errors as ``{"error": message}``."""
    logger.warning(
        "api_error",
        extra={"path": request.url.path, "code": exc.code, "status_code": exc.status_code, "error": exc.message},
    )
    return JSONResponse(content=exc.to_response().model_dump(), status_code=exc.status_code)


@app.get("/health")
async def health_check() -> JSONResponse:
    """Health check endpoint."""
    return JSONResponse(content={"status": "healthy"}, status_code=200)


# Register routers; the PWA router ends in a catch-all and must stay last.
app.include_router(api_router)

if constants.DIST_DIR.is_dir():
    app.mount("/dist", StaticFiles(directory=str(constants.DIST_DIR)), name="dist")

app.include_router(pwa_router)


if __name__ == "__main__":
    uvicorn.run("src.main:app", host=settings.host, port=settings.port)
