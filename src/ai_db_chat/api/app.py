"""FastAPI application factory."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from ai_db_chat import __version__
from ai_db_chat.api import routes
from ai_db_chat.api.errors import register_error_handlers
from ai_db_chat.config import Settings
from ai_db_chat.db.connection import create_pool
from ai_db_chat.llm import create_model_gateway
from ai_db_chat.service import AskService

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).resolve().parent.parent / "static"


def _settings_lifespan(settings: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info("LLM base URL: %s", settings.base_url)
        logger.info("Model preference: %s", "  ->  ".join(settings.models))
        logger.info("Database host: %s", settings.database_host)

        pool = create_pool(settings.database_url)
        await pool.open()
        try:
            gateway = create_model_gateway(settings)
            try:
                app.state.service = AskService(
                    pool,
                    gateway,
                    max_rows=settings.max_rows,
                    guard_mode=settings.guard_mode,
                    schema_name=settings.default_schema,
                )
                yield
            finally:
                await gateway.aclose()
        finally:
            await pool.close()

    return lifespan


def create_app(
    settings: Settings | None = None,
    *,
    service: AskService | None = None,
    static_dir: Path | None = STATIC_DIR,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Pass ``service`` to reuse an already wired pipeline (tests do this);
    otherwise ``settings`` is required and the pool and gateway are created
    in the app lifespan.
    """
    if service is None and settings is None:
        raise ValueError("create_app needs either settings or a service.")

    app = FastAPI(
        title="ai-db-chat",
        description="Ask questions about a PostgreSQL database in plain language",
        version=__version__,
        lifespan=_settings_lifespan(settings) if service is None else None,
    )
    if service is not None:
        app.state.service = service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)
    app.include_router(routes.router)

    # Mounted last so /api routes take precedence over the UI.
    if static_dir is not None and static_dir.is_dir():
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")

    return app
