"""CLI entry point for bridge-server."""

import uvicorn


def run_server() -> None:
    """Run the Extraction Bridge API server."""
    uvicorn.run(
        "extraction_bridge.main:app",
        host="0.0.0.0",
        port=8002,
        reload=False,
    )


if __name__ == "__main__":
    run_server()
