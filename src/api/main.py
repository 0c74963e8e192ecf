"""FastAPI application entry point."""
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routers import health, trpc
from core.auth import AuthService
from core.config import Settings, get_settings
from db.session import Database

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the application.

    The database and auth service are created in the lifespan from these
    settings and stored on app.state, where request dependencies find them.
    """
    app_settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
        """Manage application lifespan - startup and shutdown."""
        database = Database.from_settings(app_settings)
        await database.create_schema()
        app.state.database = database
        app.state.auth_service = AuthService.from_settings(app_settings)
        logger.info("API started")

        yield

        await database.dispose()
        logger.info("API stopped")

    app = FastAPI(
        title="Tasks & Bookmarks API",
        description="Tasks and bookmarks served over a tRPC-compatible RPC endpoint.",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(trpc.router)
    return app
