"""FastAPI application for the StudioVault REST API."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from studiovault.api.middleware import api_key_middleware
from studiovault.api.routes import documents, entries, folders, health, vault
from studiovault.core.config import (
    STUDIOVAULT_CORS_ORIGINS,
    STUDIOVAULT_HOST,
    STUDIOVAULT_PORT,
)
from studiovault.core.errors import (
    FrontMatterError,
    SecurityRejection,
    VaultValidationError,
)
from studiovault.core.service import get_vault_service

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("StudioVault API starting up...")
    service = get_vault_service()
    if service.root is None:
        restored = await service.restore_last_vault()
        if restored:
            logger.info("Restored last vault: %s", restored)
    yield
    logger.info("StudioVault API shutting down...")


async def validation_error_handler(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": str(exc)},
    )


async def security_error_handler(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_403_FORBIDDEN,
        content={"detail": str(exc)},
    )


async def os_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Map filesystem errors to HTTP status codes."""
    if isinstance(exc, FileNotFoundError):
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": "File not found"},
        )
    logger.error("Filesystem error on %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Filesystem error"},
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="StudioVault API",
        description="REST API for the StudioVault document vault",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=STUDIOVAULT_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add API key authentication middleware
    app.middleware("http")(api_key_middleware)

    # Map vault errors to responses
    app.add_exception_handler(VaultValidationError, validation_error_handler)
    app.add_exception_handler(FrontMatterError, validation_error_handler)
    app.add_exception_handler(SecurityRejection, security_error_handler)
    app.add_exception_handler(OSError, os_error_handler)

    # Include routers
    app.include_router(health.router, prefix="/api/v1", tags=["Health"])
    app.include_router(vault.router, prefix="/api/v1", tags=["Vault"])
    app.include_router(entries.router, prefix="/api/v1", tags=["Entries"])
    app.include_router(documents.router, prefix="/api/v1", tags=["Documents"])
    app.include_router(folders.router, prefix="/api/v1", tags=["Folders"])

    return app


# Create the default app instance
app = create_app()


def run_server():
    """Run the API server."""
    import uvicorn

    uvicorn.run(
        "studiovault.api.app:app",
        host=STUDIOVAULT_HOST,
        port=STUDIOVAULT_PORT,
        reload=False,
    )


if __name__ == "__main__":
    run_server()
