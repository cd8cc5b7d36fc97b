"""Extraction Bridge - metadata extraction orchestration and field remapping."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("extraction-bridge")
except PackageNotFoundError:
    # Not installed, running from source without build
    __version__ = "0.0.0.dev0"
