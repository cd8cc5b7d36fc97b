"""FastAPI app factory for Extraction Bridge."""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from extraction_bridge import __version__
from extraction_bridge.routers import (
    extract_router,
    health_router,
    settings_router,
)

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Extraction Bridge",
        description="Metadata extraction orchestration and field remapping API",
        version=__version__,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(extract_router)
    app.include_router(health_router)
    app.include_router(settings_router)

    return app
