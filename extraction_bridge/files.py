"""Host file abstraction consumed by the extraction bridge."""

import logging
import mimetypes
import shutil
import uuid
from pathlib import Path
from typing import Any, Protocol

from extraction_bridge.config import get_settings

logger = logging.getLogger(__name__)


class FileDescriptor(Protocol):
    """Protocol for files handed to the extraction bridge."""

    def get_property(self, name: str) -> Any:
        """Get a file property (at least "extension" must be supported)."""
        ...

    def get_for_local_processing(self, writable: bool = True) -> str:
        """Get a local path to the file's content.

        Args:
            writable: If True, return a private copy that may be modified

        Returns:
            Path of a locally accessible file
        """
        ...


class LocalFile:
    """File on the local filesystem."""

    driver_type = "Local"

    def __init__(self, path: str | Path, temp_dir: str | Path | None = None):
        self.path = Path(path)
        self.temp_dir = Path(temp_dir) if temp_dir else None

    def __repr__(self) -> str:
        return f"LocalFile({str(self.path)!r})"

    @property
    def extension(self) -> str:
        return self.path.suffix.lstrip(".").lower()

    def get_property(self, name: str) -> Any:
        if name == "extension":
            return self.extension
        if name == "name":
            return self.path.name
        if name == "identifier":
            return str(self.path)
        if name == "size":
            return self.path.stat().st_size
        if name == "mime_type":
            mime_type, _ = mimetypes.guess_type(self.path.name)
            return mime_type or "application/octet-stream"
        raise KeyError(f"Unknown file property: {name}")

    def get_for_local_processing(self, writable: bool = True) -> str:
        if not self.path.is_file():
            raise FileNotFoundError(f"File not found: {self.path}")

        if not writable:
            return str(self.path)

        if self.temp_dir is None:
            temp_dir = Path(get_settings().temp_dir)
        else:
            temp_dir = self.temp_dir
        temp_dir.mkdir(parents=True, exist_ok=True)

        copy_path = temp_dir / f"{uuid.uuid4().hex}{self.path.suffix}"
        shutil.copy2(self.path, copy_path)
        logger.debug(f"Copied {self.path.name} to {copy_path} for processing")
        return str(copy_path)
