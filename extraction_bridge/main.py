"""FastAPI application for Extraction Bridge."""

# Setup logging before any other imports
# ruff: noqa: E402 (imports after logging setup is intentional)
from extraction_bridge.config import get_settings
from extraction_bridge.utils.logging import setup_logging

setup_logging(get_settings().log_level)

# Create the FastAPI application
from extraction_bridge.app import create_app

app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8002)
