"""FastAPI application factory."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator
import logging

from fastapi import FastAPI

from .routes import events_router, todos_router
from ..container import get_container

logger = logging.getLogger(__name__)


def _ensure_document_store() -> None:
    """Fall back to the filesystem store when nothing is configured."""
    from ..repositories.filesystem import FilesystemDocumentStore

    container = get_container()
    try:
        _ = container.document_store
    except RuntimeError:
        settings = container.task_lists_settings
        container.configure_document_store(
            lambda: FilesystemDocumentStore(
                settings.root_dir,
                extension=settings.document_extension,
            )
        )
        logger.info(f"Serving vault at {settings.root_dir}")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    _ensure_document_store()
    queue = get_container().event_queue
    queue.start()
    yield
    await queue.stop()


def create_app(
    title: str = "Task Lists API",
    version: str = "1.0.0",
) -> FastAPI:
    """Create FastAPI application.

    Args:
        title: API title
        version: API version

    Returns:
        FastAPI application instance
    """
    app = FastAPI(
        title=title,
        version=version,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.include_router(events_router)
    app.include_router(todos_router)

    @app.get("/health")
    async def health_check() -> dict:
        """Health check endpoint."""
        return {"status": "healthy", "version": version}

    return app


# Create default app instance
app = create_app()
