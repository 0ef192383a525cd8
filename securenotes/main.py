"""Main FastAPI application."""
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from securenotes.api import api_router
from securenotes.config import Settings, settings as default_settings
from securenotes.core.deps import build_note_service
from securenotes.core.error_handler import register_error_handlers
from securenotes.core.instance_lock import InstanceLock

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure FastAPI application.

    Raises:
        ConfigurationError: the master key is missing or malformed; no app is
            created in that case
    """
    settings = settings or default_settings
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Fails fast on a bad SECRET_KEY, before any route exists
    note_service = build_note_service(settings)
    instance_lock = InstanceLock(settings.lock_path)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator:
        """Application lifespan manager."""
        # Startup
        if settings.single_instance:
            instance_lock.acquire()
        logger.info(f"{settings.app_name} {settings.app_version} serving notes from {settings.notes_path}")

        yield

        # Shutdown
        instance_lock.release()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.note_service = note_service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app, debug=settings.debug)
    app.include_router(api_router)

    # Health check endpoint
    @app.get("/health")
    async def health_check():
        return {"status": "healthy", "version": settings.app_version}

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "securenotes.main:create_app",
        factory=True,
        host=default_settings.host,
        port=default_settings.port,
        reload=default_settings.debug,
    )
