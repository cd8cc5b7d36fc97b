"""Utility functions for Extraction Bridge."""

from extraction_bridge.utils.datetime import to_timestamp

__all__ = ["to_timestamp"]
