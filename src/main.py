# pyright: reportMissingTypeStubs=false
"""
MD Solo Backend

A FastAPI application for a solo medical practice: registers patients,
books visits and renders views of records kept in Google Sheets, Google
Calendar and Google Drive.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from api import pages
from api.controllers import build_registry
from api.dispatcher import Dispatcher
from core.config import load_config
from core.exceptions import ExternalServiceError, HandlerNotFound, InvalidPayload
from services.workspace import build_workspace

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler()],
)

logger = logging.getLogger(__name__)


def build_dispatcher() -> Dispatcher:
    """Load the configuration once and wire the workspace, registry and dispatcher."""
    config = load_config()
    workspace = build_workspace(config)
    return Dispatcher(build_registry(), workspace)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup and shutdown events."""
    logger.info("🚀 Starting MD Solo Backend")
    if getattr(app.state, "dispatcher", None) is None:
        app.state.dispatcher = build_dispatcher()
        logger.info("✅ Dispatcher ready")

    yield

    logger.info("🛑 Shutting down MD Solo Backend")


async def handler_not_found_handler(request: Request, exc: HandlerNotFound):
    """Handle requests for pages without a controller."""
    logger.warning(f"HandlerNotFound: {exc}")
    return JSONResponse(
        status_code=404,
        content={"detail": str(exc), "type": "handler_not_found"},
    )


async def invalid_payload_handler(request: Request, exc: InvalidPayload):
    """Handle malformed ``data`` payloads."""
    logger.warning(f"InvalidPayload: {exc}")
    return JSONResponse(
        status_code=400,
        content={"detail": str(exc), "type": "invalid_payload"},
    )


async def external_service_error_handler(request: Request, exc: ExternalServiceError):
    """Handle Google API failures not recovered by a controller."""
    logger.exception(f"External service error: {exc}")
    return JSONResponse(
        status_code=502,
        content={"detail": "External service error", "type": "external_service_error"},
    )


async def global_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions globally."""
    logger.exception(f"Unhandled exception: {exc}")
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "type": "internal_error"},
    )


def create_app(dispatcher: Optional[Dispatcher] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        dispatcher: Pre-built dispatcher; when omitted one is built from the
            environment at start-up
    """
    app = FastAPI(
        title="MD Solo Backend",
        description="Medical Document & Schedule Organizer",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.dispatcher = dispatcher

    app.include_router(pages.router)

    app.add_exception_handler(HandlerNotFound, handler_not_found_handler)
    app.add_exception_handler(InvalidPayload, invalid_payload_handler)
    app.add_exception_handler(ExternalServiceError, external_service_error_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    @app.get("/health", summary="Health check")
    async def health_check() -> dict[str, str]:
        """Check if the API is healthy and responding."""
        return {"status": "healthy"}

    return app


app = create_app()
