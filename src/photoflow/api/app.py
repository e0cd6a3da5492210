"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from photoflow.api.admin import router as admin_router
from photoflow.api.auth import router as auth_router
from photoflow.api.projects import portfolio_router, reports_router
from photoflow.api.projects import router as projects_router
from photoflow.app_logging import configure_logging
from photoflow.containers import AppContainer
from photoflow.errors import (
    AuthenticationRequiredError,
    NotFoundError,
    PhotoFlowError,
    StorageFailureError,
)

_ERROR_STATUS: dict[type[PhotoFlowError], int] = {
    AuthenticationRequiredError: status.HTTP_401_UNAUTHORIZED,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    StorageFailureError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(title="PhotoFlow", lifespan=lifespan)
    app.state.container = container

    app.include_router(auth_router)
    app.include_router(projects_router)
    app.include_router(reports_router)
    app.include_router(portfolio_router)
    app.include_router(admin_router)

    @app.exception_handler(PhotoFlowError)
    async def handle_app_error(request: Request, exc: PhotoFlowError) -> JSONResponse:
        status_code = status.HTTP_400_BAD_REQUEST
        for error_type, mapped in _ERROR_STATUS.items():
            if isinstance(exc, error_type):
                status_code = mapped
                break
        if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error(
                "Request failed: %s %s",
                request.method,
                request.url.path,
                extra={"context": exc.context},
            )
        return JSONResponse(status_code=status_code, content={"detail": exc.message})

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
