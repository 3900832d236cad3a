"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger

from gmailrelay.infrastructure import get_settings
from gmailrelay.infrastructure.logging_setup import configure_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")
    yield
    logger.info("Shutdown complete")


async def _invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning(f"Invalid request to {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=400, content={"success": False, "message": "Invalid request"})


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Relays Gmail push notifications into a spreadsheet and chat channels",
        lifespan=lifespan,
    )
    app.add_exception_handler(RequestValidationError, _invalid_request)

    from gmailrelay.infrastructure.http import pubsub_router, tasks_router

    app.include_router(tasks_router)
    app.include_router(pubsub_router)

    @app.get("/health")
    async def health() -> dict:
        return {"status": "healthy", "time": datetime.now(timezone.utc).isoformat()}

    return app


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(create_app(), host=settings.api_host, port=settings.api_port, log_level=settings.log_level.lower())


# Create app instance
app = create_app()
