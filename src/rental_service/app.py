from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import redis.asyncio as aioredis
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from rental_service.api.middleware.correlation_id import CorrelationIdMiddleware
from rental_service.api.middleware.timing import RequestTimingMiddleware
from rental_service.api.v1.routers import (
    auth,
    contact,
    health,
    pages,
    payments,
    properties,
    ws,
)
from rental_service.application.exceptions import (
    AppError,
    ConflictError,
    ForbiddenError,
    InvalidCredentialsError,
    NotFoundError,
    PaymentGatewayError,
    PersistenceError,
    ValidationError,
)
from rental_service.config import settings
from rental_service.infrastructure.bus.redis_relay import RedisChatRelay
from rental_service.infrastructure.ws.registry import ConnectionRegistry

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: dict[type[AppError], int] = {
    NotFoundError: 404,
    ForbiddenError: 403,
    ConflictError: 409,
    ValidationError: 422,
    InvalidCredentialsError: 400,
    PersistenceError: 503,
    PaymentGatewayError: 502,
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup / shutdown lifecycle."""
    relay: RedisChatRelay | None = None
    if settings.CHAT_FANOUT_ENABLED:
        app.state.redis = aioredis.from_url(settings.REDIS_URL)
        relay = RedisChatRelay(app.state.redis, settings.CHAT_FANOUT_CHANNEL, app.state.registry)
        await relay.start()
        app.state.chat_relay = relay

    yield

    if relay is not None:
        await relay.stop()
        await app.state.redis.aclose()
        logger.info("Redis connection pool closed")
    app.state.registry.clear()


def create_app() -> FastAPI:
    app = FastAPI(
        title="Rental Service",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.registry = ConnectionRegistry()

    app.add_middleware(RequestTimingMiddleware)
    app.add_middleware(CorrelationIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(properties.router)
    app.include_router(contact.router)
    app.include_router(payments.router)
    app.include_router(ws.router)
    app.mount(
        "/uploads",
        StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False),
        name="uploads",
    )
    # Catch-all; must stay last.
    app.include_router(pages.router)

    return app


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def _app_error(_req: Request, exc: AppError) -> JSONResponse:
        status_code = next(
            (code for cls, code in _STATUS_BY_ERROR.items() if isinstance(exc, cls)),
            500,
        )
        if status_code >= 500:
            logger.warning("%s: %s", type(exc).__name__, exc.detail)
        return JSONResponse(status_code=status_code, content={"detail": exc.detail})
