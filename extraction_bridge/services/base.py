"""Base class and helpers for extraction services."""

import logging
import math
import numbers
from abc import ABC, abstractmethod
from typing import Any

logger = logging.getLogger(__name__)


class ExtractionService(ABC):
    """Base class for metadata extraction backends.

    The bridge drives every backend the same way:

        service.set_input_file(path, extension)
        if service.process():
            raw = service.get_output()
    """

    key: str = ""

    def __init__(self) -> None:
        self.input_file: str | None = None
        self.input_type: str | None = None
        self.output: dict[str, Any] | None = None

    def get_service_key(self) -> str:
        return self.key

    def set_input_file(self, path: str, file_type: str) -> None:
        """Set the file to process and its type (extension)."""
        self.input_file = path
        self.input_type = file_type
        self.output = None

    def process(self) -> bool:
        """Run the extraction.

        Returns:
            True if output is available via get_output()
        """
        if self.input_file is None:
            logger.warning(f"Service {self.key}: no input file set")
            return False

        try:
            output = self._extract(self.input_file)
        except Exception as e:
            logger.warning(f"Service {self.key} failed for {self.input_file}: {e}")
            return False

        if not isinstance(output, dict):
            logger.debug(f"Service {self.key} returned no data for {self.input_file}")
            return False

        self.output = output
        return True

    def get_output(self) -> dict[str, Any] | None:
        return self.output

    @abstractmethod
    def _extract(self, file_path: str) -> dict[str, Any] | None:
        """Extract raw metadata from a local file."""
        ...


def make_json_safe(value: Any) -> Any:
    """Convert raw library values into plain JSON-compatible values.

    Bytes are decoded (NUL padding stripped), rationals become floats and
    tuples become lists.
    """
    if isinstance(value, dict):
        return {str(k): make_json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [make_json_safe(v) for v in value]
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace").rstrip("\x00")
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, (str, int, bool)) or value is None:
        return value
    if isinstance(value, numbers.Real):
        try:
            result = float(value)
        except (ZeroDivisionError, ValueError, TypeError):
            return None
        return result if math.isfinite(result) else None
    return str(value)
