# ---------------------------------------------------------
# phoenix/main.py
# Cloud Phoenix - IT asset tracking backend
#
# Run: cloudphoenix                                   (console script, reads .env)
#  or: uvicorn phoenix.main:create_app --factory      (from repo root)
#
# - FastAPI + MongoDB (pymongo)
# - /api/auth     : register, login, current user (x-auth-token)
# - /api/assets   : asset CRUD with partial updates
# - /api/projects, /api/tasks, /api/handoffs : declared, answer 501
# ---------------------------------------------------------

from __future__ import annotations

import sys
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Optional

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from pymongo.errors import PyMongoError

from phoenix import routes_assets, routes_auth
from phoenix.config import ConfigError, Settings
from phoenix.db import AppContext, connect
from phoenix.errors import register_exception_handlers
from phoenix.logging_config import configure_logging, get_logger
from phoenix.modules import handoffs, projects, tasks

_logger = get_logger(__name__)

LIVENESS_TEXT = "Cloud Phoenix API is running..."


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    owns_context = app.state.context is None
    if owns_context:
        try:
            app.state.context = connect(app.state.settings)
        except PyMongoError as exc:
            _logger.error("db.connect_failed", error=str(exc))
            raise
    try:
        yield
    finally:
        if owns_context and app.state.context is not None:
            app.state.context.close()
            app.state.context = None


def create_app(context: Optional[AppContext] = None, settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI app.

    With a prebuilt context (tests, run()) the app uses it as-is. Without one
    the app reads settings from the environment and connects during startup;
    a store that cannot be reached aborts startup.
    """
    if context is not None:
        settings = context.settings
    elif settings is None:
        settings = Settings.from_env()

    app = FastAPI(title="Cloud Phoenix Backend", version="2.0.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.context = context

    # Exactly one browser origin, from configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.cors_origin],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(routes_auth.router)
    app.include_router(routes_assets.router)
    app.include_router(projects.router)
    app.include_router(tasks.router)
    app.include_router(handoffs.router)

    @app.get("/", response_class=PlainTextResponse)
    def root() -> str:
        return LIVENESS_TEXT

    @app.get("/health")
    def health() -> Dict[str, str]:
        return {"status": "ok"}

    return app


def run() -> None:
    """Console entry point: load .env, validate config, connect, serve."""
    load_dotenv()

    try:
        settings = Settings.from_env()
    except ConfigError as exc:
        configure_logging()
        _logger.error("config.invalid", error=str(exc))
        sys.exit(1)

    configure_logging(settings.log_level, settings.log_format)
    _logger.info("config.loaded", env=settings.env, port=settings.port, cors_origin=settings.cors_origin)

    # Fail fast: no retry loop, no degraded mode
    try:
        context = connect(settings)
    except PyMongoError as exc:
        _logger.error("db.connect_failed", error=str(exc))
        sys.exit(1)

    app = create_app(context=context)
    try:
        uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)
    finally:
        context.close()


if __name__ == "__main__":
    run()
