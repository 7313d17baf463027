"""FastAPI application factory for the local stub of the TaskFlow service."""

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from .routes import auth_router, tasks_router
from ..domain.errors import (
    SessionExpiredError,
    TaskNotFoundError,
    ValidationError,
)
from ..repositories.memory import InMemoryBackend


def create_app(
    backend: Optional[InMemoryBackend] = None,
    title: str = "TaskFlow Stub API",
    version: str = "1.0.0",
) -> FastAPI:
    """Create FastAPI application.

    Args:
        backend: In-memory backend holding accounts and tasks
        title: API title
        version: API version

    Returns:
        FastAPI application instance
    """
    app = FastAPI(
        title=title,
        version=version,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.backend = backend or InMemoryBackend()

    # Errors come back as plain text, like the real service
    @app.exception_handler(SessionExpiredError)
    async def session_expired_handler(request: Request, exc: SessionExpiredError) -> PlainTextResponse:
        return PlainTextResponse(str(exc), status_code=401)

    @app.exception_handler(ValidationError)
    async def validation_handler(request: Request, exc: ValidationError) -> PlainTextResponse:
        return PlainTextResponse(str(exc), status_code=400)

    @app.exception_handler(TaskNotFoundError)
    async def not_found_handler(request: Request, exc: TaskNotFoundError) -> PlainTextResponse:
        return PlainTextResponse(str(exc), status_code=404)

    # Include routers
    app.include_router(auth_router)
    app.include_router(tasks_router)

    @app.get("/health")
    async def health_check() -> dict:
        """Health check endpoint."""
        return {"status": "healthy", "version": version}

    return app


# Create default app instance
app = create_app()
