"""API routers for Extraction Bridge."""

from extraction_bridge.routers.extract import router as extract_router
from extraction_bridge.routers.health import router as health_router
from extraction_bridge.routers.settings import router as settings_router

__all__ = [
    "extract_router",
    "health_router",
    "settings_router",
]
