"""API entry point: app factory, lifespan wiring and the uvicorn runner."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tenkai.config import load_settings
from tenkai.logging import configure_logging
from tenkai.responses import register_error_handlers
from tenkai.routes import (
    ai_router,
    auth_router,
    git_router,
    local_router,
    root_router,
    settings_router,
)
from tenkai.startup import init_generator, init_http_client, init_workspace

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = logging.getLogger(__name__)

_CORS_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
_CORS_HEADERS = ["Content-Type", "Authorization"]


def create_app() -> FastAPI:
    """Build the FastAPI application with its collaborators attached to ``app.state``."""
    settings = load_settings()
    configure_logging(settings.app.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("API starting: env=%s", settings.app.env)
        http = init_http_client(settings)
        generator = init_generator(settings)

        app.state.settings = settings
        app.state.http = http
        app.state.generator = generator
        app.state.workspace = init_workspace(settings, generator)

        if not settings.github.oauth_configured:
            logger.warning("GitHub OAuth is not configured: sign-in is disabled")
        logger.info("API ready: ai_enabled=%s", generator.enabled)

        yield

        logger.info("API shutting down")
        await http.aclose()

    app = FastAPI(title="tenkai", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=_CORS_METHODS,
        allow_headers=_CORS_HEADERS,
    )
    register_error_handlers(app)

    app.include_router(root_router)
    app.include_router(local_router)
    app.include_router(ai_router)
    app.include_router(auth_router)
    app.include_router(settings_router)
    app.include_router(git_router)
    return app


def main() -> None:
    """Run the API server."""
    settings = load_settings()
    uvicorn.run(create_app(), host=settings.app.host, port=settings.app.port)


if __name__ == "__main__":
    main()
