"""Sea battle ASGI entrypoint (FastAPI, JSON only)."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI
from fastapi.middleware.gzip import GZipMiddleware

from src.seabattle.api.routes.game import router as game_router
from src.seabattle.core.config import APP_VERSION, ENVIRONMENT
from src.seabattle.core.logging import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    configure_logging()
    logger.info("Starting %s version=%s env=%s", app.title, APP_VERSION, ENVIRONMENT)
    yield


app = FastAPI(title="Sea Battle", version=APP_VERSION, lifespan=lifespan)

app.add_middleware(GZipMiddleware, minimum_size=1000)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "ts": datetime.now(UTC).isoformat()}


app.include_router(game_router)
