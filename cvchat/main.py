"""FastAPI entrypoint: wires config, container, routes, error handlers and lifecycle hooks.

Run with:
    uvicorn cvchat.main:app --port 8000
"""

from __future__ import annotations

import time
from contextlib import asynccontextmanager
from typing import Callable

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cvchat.api.errors import register_error_handlers
from cvchat.api.http.chat import router as chat_router
from cvchat.api.http.health import router as health_router
from cvchat.core.config import Settings
from cvchat.core.container import build_container
from cvchat.core.lifecycle import on_shutdown, on_startup
from cvchat.infra.http.transport import HttpTransport
from cvchat.infra.observability.logger import setup_logging


def create_app(
    settings: Settings | None = None,
    *,
    transport: HttpTransport | None = None,
    sleep: Callable[[float], None] | None = None,
) -> FastAPI:
    settings = settings or Settings.from_env()
    setup_logging(settings.log_level)
    container = build_container(settings, transport=transport, sleep=sleep or time.sleep)

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        on_startup(container)
        try:
            yield
        finally:
            on_shutdown()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
    )
    register_error_handlers(app)

    app.include_router(health_router)
    app.include_router(chat_router)

    return app


app = create_app()
