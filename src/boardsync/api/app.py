"""FastAPI application setup."""

from __future__ import annotations

import os
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from boardsync import __version__
from boardsync.api.dependencies import (
    Authenticator,
    BearerTokenAuthenticator,
    close_authenticator,
    close_remote_client,
    init_authenticator,
    init_remote_client,
    init_settings,
)
from boardsync.api.models import ErrorResponse
from boardsync.api.routes import board
from boardsync.logging import setup_logging
from boardsync.remote import RemoteBoardError

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from boardsync.config import Settings


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    # Startup
    settings = init_settings(app.state.settings)
    init_remote_client(settings)
    authenticator = app.state.authenticator or BearerTokenAuthenticator(settings.api_tokens)
    init_authenticator(authenticator)

    yield
    # Shutdown
    close_authenticator()
    await close_remote_client()


def create_app(
    settings: Settings | None = None, authenticator: Authenticator | None = None
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Runtime settings; read from the environment at startup when omitted.
        authenticator: Request authenticator; defaults to the configured bearer tokens.
    """
    app = FastAPI(
        title="boardsync API",
        description="Kanban board sync over GitHub project boards",
        version=__version__,
        lifespan=lifespan,
    )

    # Store config for lifespan manager
    app.state.settings = settings
    app.state.authenticator = authenticator

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(RemoteBoardError)
    async def remote_error_handler(_request: Request, _exc: RemoteBoardError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content=ErrorResponse(error="Upstream board request failed").model_dump(),
        )

    # Include routers
    app.include_router(board.router, prefix="/api/v1")

    return app


def serve() -> None:
    """Run the API with uvicorn."""
    setup_logging()
    uvicorn.run(
        "boardsync.api.app:app",
        host=os.environ.get("BOARDSYNC_HOST", "127.0.0.1"),
        port=int(os.environ.get("BOARDSYNC_PORT", "8000")),
    )


# Default app instance
app = create_app()
