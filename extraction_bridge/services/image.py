"""Basic image properties via Pillow.

Raw output:

    {"format": "JPEG", "width": 640, "height": 480, "mode": "RGB",
     "frames": 1, "info": {"dpi": [72.0, 72.0], ...}}
"""

import logging
from typing import Any

from PIL import Image

from .base import ExtractionService, make_json_safe
from .registry import SERVICE_TYPE, register_service

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = ["jpg", "jpeg", "png", "gif", "tif", "tiff", "webp", "bmp"]


def read_image_info(file_path: str) -> dict[str, Any]:
    """Read format, dimensions and scalar info entries of an image."""
    with Image.open(file_path) as image:
        # Embedded blobs (exif, icc_profile, xmp) are served by dedicated subtypes
        info = {
            key: value for key, value in image.info.items()
            if not isinstance(value, bytes)
        }
        return {
            "format": image.format,
            "width": image.width,
            "height": image.height,
            "mode": image.mode,
            "frames": getattr(image, "n_frames", 1),
            "info": make_json_safe(info),
        }


class PillowImageService(ExtractionService):
    """Image format and dimensions."""

    key = "pillow"

    def _extract(self, file_path: str) -> dict[str, Any] | None:
        return read_image_info(file_path)


register_service(
    SERVICE_TYPE,
    PillowImageService.key,
    PillowImageService,
    subtypes=IMAGE_EXTENSIONS,
)
