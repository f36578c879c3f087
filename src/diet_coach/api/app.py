"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from diet_coach.api.admin import router as admin_router
from diet_coach.api.users import router as users_router
from diet_coach.app_logging import configure_logging
from diet_coach.containers import AppContainer
from diet_coach.domain.errors import (
    GenerationFormatError,
    InvalidInput,
    PreconditionMissing,
    TransportError,
)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(users_router)
    app.include_router(admin_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.exception_handler(PreconditionMissing)
    async def precondition_missing(
        request: Request, exc: PreconditionMissing
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_412_PRECONDITION_FAILED,
            content={"detail": str(exc), "missing": exc.fact},
        )

    @app.exception_handler(InvalidInput)
    async def invalid_input(request: Request, exc: InvalidInput) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": str(exc)},
        )

    @app.exception_handler(GenerationFormatError)
    async def generation_format_error(
        request: Request, exc: GenerationFormatError
    ) -> JSONResponse:
        logger.warning(
            "Model reply rejected: %s", exc, extra={"path": request.url.path}
        )
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"detail": "The advisor returned an unexpected reply."},
        )

    @app.exception_handler(TransportError)
    async def transport_error(request: Request, exc: TransportError) -> JSONResponse:
        logger.exception("External service failed", extra={"path": request.url.path})
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": _error_detail(container, exc)},
        )

    return app


def _error_detail(container: AppContainer, exc: Exception) -> str:
    """Return a user-facing error message with local debug info."""
    fallback = "An external service is unavailable. Please try again."
    if container.settings.environment == "local":
        return f"{fallback} (debug: {type(exc).__name__}: {exc})"
    return fallback
