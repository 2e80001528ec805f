from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from barter_realtime.api.middleware.correlation_id import CorrelationIdMiddleware
from barter_realtime.api.v1.routers import health, internal, presence, ws
from barter_realtime.application.exceptions import AuthenticationError, ForbiddenError
from barter_realtime.config import settings
from barter_realtime.infrastructure.ws.manager import ConnectionManager

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup / shutdown lifecycle."""
    logger.info("Realtime service started (heartbeat=%ss)", settings.WS_HEARTBEAT_SECONDS)

    yield

    online = len(app.state.manager.presence)
    if online:
        logger.info("Shutting down with %d users online", online)


def create_app() -> FastAPI:
    app = FastAPI(
        title="Barter Realtime Service",
        version="0.1.0",
        lifespan=lifespan,
    )
    # Presence and rooms live for the lifetime of this process only.
    app.state.manager = ConnectionManager()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(CorrelationIdMiddleware)

    _register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(presence.router)
    app.include_router(internal.router)
    app.include_router(ws.router)

    return app


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AuthenticationError)
    async def _unauthenticated(_req: Request, exc: AuthenticationError) -> JSONResponse:
        return JSONResponse(status_code=401, content={"detail": exc.detail})

    @app.exception_handler(ForbiddenError)
    async def _forbidden(_req: Request, exc: ForbiddenError) -> JSONResponse:
        return JSONResponse(status_code=403, content={"detail": exc.detail})