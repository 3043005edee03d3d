"""FastAPI application entrypoint."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from services.cache import get_rate_cache
from shared.config import configure_logging
from shared.settings import app_env
from shared.version import __version__, get_version_info

from .errors import register_error_handlers
from .routers import analysis, dashboard, exchange_rates, metrics, operations

configure_logging()

logger = logging.getLogger(__name__)
_version_info = get_version_info()
logger.info(
    "Starting FastAPI backend - version=%s - build=%s - env=%s",
    _version_info["version"],
    _version_info["build_signature"],
    app_env,
)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    yield
    # Only close a cache that was actually built during this run.
    if get_rate_cache.cache_info().currsize:
        logger.info("Cerrando recursos del caché FX")
        get_rate_cache().close()


app = FastAPI(title="Portafolio Dashboard API", version=__version__, lifespan=lifespan)

register_error_handlers(app)

app.include_router(exchange_rates.router)
app.include_router(dashboard.router)
app.include_router(operations.router)
app.include_router(analysis.router)
app.include_router(metrics.router)


@app.get("/health", summary="Service health status")
async def health() -> dict[str, str]:
    """Simple health-check endpoint for the API."""
    return {"status": "ok"}
