"""Main FastAPI application."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from motor.motor_asyncio import AsyncIOMotorClient

from application.ports.repositories.object_index import ObjectIndex
from infrastructure.config import settings
from infrastructure.logging import setup_logging
from interfaces.api.routes import blob_router, object_router
from interfaces.dependencies import get_container

# Configure structured logging
setup_logging()

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:  # noqa: ARG001
    """Handle application startup and shutdown."""
    logger.info("app_starting", env=settings.app_env)

    container = get_container()
    try:
        await container[ObjectIndex].ensure_indexes()
    except Exception as e:  # noqa: BLE001
        # Listing still works without the index, only slower
        logger.warning("object_index_initialization_failed", error=str(e))

    logger.info("app_ready")

    yield

    logger.info("app_shutting_down")
    container[AsyncIOMotorClient].close()
    logger.info("app_stopped")


async def request_validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Report malformed requests as 400 instead of FastAPI's default 422."""
    logger.info("request_validation_failed", path=request.url.path, errors=len(exc.errors()))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid request"},
    )


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        description="Upload, index and retrieve binary objects",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)

    app.include_router(object_router)
    app.include_router(blob_router)

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("interfaces.api.main:app", host=settings.api_host, port=settings.api_port)
