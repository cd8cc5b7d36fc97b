"""FFprobe metadata extraction for audio/video files.

Raw output is ffprobe's JSON (format + streams), e.g.:

    {"format": {"duration": "12.5", "tags": {"title": ...}}, "streams": [...]}
"""

import json
import logging
import shutil
import subprocess
from typing import Any

from extraction_bridge.config import get_settings

from .base import ExtractionService
from .registry import SERVICE_TYPE, register_service

logger = logging.getLogger(__name__)

FFPROBE_EXTENSIONS = [
    # Video
    "mp4", "m4v", "mov", "mkv", "webm", "avi", "wmv", "flv", "mpg", "mpeg",
    "mts", "m2ts", "mxf", "3gp", "ogv",
    # Audio
    "mp3", "wav", "aac", "m4a", "flac", "ogg", "oga", "opus", "wma", "aif", "aiff",
]


def ffprobe_available() -> bool:
    """Check if the ffprobe binary is on PATH."""
    return shutil.which("ffprobe") is not None


def run_ffprobe(file_path: str, timeout: int | None = None) -> dict[str, Any]:
    """Run ffprobe and return parsed JSON output.

    Args:
        file_path: Path to the media file
        timeout: Seconds before giving up (defaults to settings.ffprobe_timeout)
    """
    if timeout is None:
        timeout = get_settings().ffprobe_timeout

    cmd = [
        "ffprobe",
        "-v", "quiet",
        "-print_format", "json",
        "-show_format",
        "-show_streams",
        file_path,
    ]

    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            check=True,
            timeout=timeout,
        )
        return json.loads(result.stdout)
    except subprocess.TimeoutExpired:
        logger.error(f"ffprobe timed out after {timeout}s for {file_path}")
        raise RuntimeError(f"ffprobe timed out for {file_path}")
    except subprocess.CalledProcessError as e:
        logger.error(f"ffprobe failed: {e.stderr}")
        raise RuntimeError(f"ffprobe failed for {file_path}: {e.stderr}")
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse ffprobe output: {e}")
        raise RuntimeError(f"Failed to parse ffprobe output: {e}")


class FFprobeService(ExtractionService):
    """Audio/video metadata via ffprobe."""

    key = "ffprobe"

    def _extract(self, file_path: str) -> dict[str, Any] | None:
        return run_ffprobe(file_path)


register_service(
    SERVICE_TYPE,
    FFprobeService.key,
    FFprobeService,
    subtypes=FFPROBE_EXTENSIONS,
    is_available=ffprobe_available,
)
