"""Configuration settings for Extraction Bridge."""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel

logger = logging.getLogger(__name__)

# =============================================================================
# Default Constants
# =============================================================================

# Config file location
DEFAULT_CONFIG_PATH = Path.home() / ".config" / "extraction-bridge" / "config.json"

# API
DEFAULT_API_VERSION = "1.0"
DEFAULT_LOG_LEVEL = "INFO"

# Mapping documents shipped with the package
BUNDLED_MAPPING_DIR = Path(__file__).parent / "mappings"

# Image extensions that also get the embedded IPTC/EXIF subtypes probed
DEFAULT_IMAGE_EXTENSIONS: list[str] = ["jpg", "jpeg", "tif", "tiff"]

# Backends
DEFAULT_FFPROBE_TIMEOUT = 30

# Temp directory (writable local copies)
DEFAULT_TEMP_DIR = "/tmp/extraction-bridge"


# =============================================================================
# Settings (loaded from JSON config file)
# =============================================================================


class Settings(BaseModel):
    """Application settings loaded from JSON config file.

    Config file location: ~/.config/extraction-bridge/config.json

    mapping_dirs are searched in order before the bundled mappings, so a
    deployment can override a single backend's mapping without forking it.
    """

    # API settings
    api_version: str = DEFAULT_API_VERSION
    log_level: str = DEFAULT_LOG_LEVEL

    # Mapping documents
    mapping_dirs: list[str] = []

    # Subtype resolution
    image_extensions: list[str] = DEFAULT_IMAGE_EXTENSIONS.copy()

    # Backend settings
    ffprobe_timeout: int = DEFAULT_FFPROBE_TIMEOUT

    # Temp directory for writable local copies
    temp_dir: str = DEFAULT_TEMP_DIR

    def get_mapping_dirs(self) -> list[Path]:
        """Get mapping search path (user directories first, bundled last)."""
        return [Path(d).expanduser() for d in self.mapping_dirs] + [BUNDLED_MAPPING_DIR]


def get_config_path() -> Path:
    """Get the config file path."""
    return DEFAULT_CONFIG_PATH


def load_config_from_file(config_path: Path | None = None) -> dict[str, Any]:
    """Load configuration from JSON file.

    Args:
        config_path: Optional path to config file. Defaults to ~/.config/extraction-bridge/config.json

    Returns:
        Dictionary of settings (empty if file doesn't exist)
    """
    path = config_path or DEFAULT_CONFIG_PATH

    if not path.exists():
        return {}

    try:
        with open(path) as f:
            return json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning(f"Failed to load config from {path}: {e}")
        return {}


def save_config_to_file(settings: Settings, config_path: Path | None = None) -> None:
    """Save configuration to JSON file.

    Args:
        settings: Settings instance to save
        config_path: Optional path to config file. Defaults to ~/.config/extraction-bridge/config.json
    """
    path = config_path or DEFAULT_CONFIG_PATH

    # Create directory if needed
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w") as f:
        json.dump(settings.model_dump(), f, indent=2)

    logger.info(f"Saved config to {path}")


# Cached settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get settings instance (loaded from config file on first call)."""
    global _settings

    if _settings is None:
        config_data = load_config_from_file()
        _settings = Settings(**config_data)
        if config_data:
            logger.info(f"Loaded settings from {DEFAULT_CONFIG_PATH}")
        else:
            logger.info("Using default settings")

    return _settings


def reload_settings() -> Settings:
    """Reload settings from config file."""
    global _settings
    _settings = None
    return get_settings()
