"""Embedded EXIF metadata via Pillow (subtype "image:exif").

Raw output groups tags by IFD, keyed by tag name:

    {"IFD0": {"Make": "Canon", ...},
     "EXIF": {"DateTimeOriginal": "2014:03:02 10:11:12", ...},
     "GPS": {"GPSLatitude": [63.0, 6.0, 38.88], "Latitude": 63.11, ...}}
"""

import logging
from typing import Any

from PIL import ExifTags, Image

from .base import ExtractionService, make_json_safe
from .registry import SERVICE_TYPE, register_service

logger = logging.getLogger(__name__)

SUBTYPE_EXIF = "image:exif"

# IFD pointer tags, replaced by their own groups in the output
_IFD_POINTERS = {ExifTags.IFD.Exif, ExifTags.IFD.GPSInfo, ExifTags.IFD.Interop}


def dms_to_decimal(dms: Any, ref: str | None) -> float | None:
    """Convert (degrees, minutes, seconds) to decimal degrees."""
    try:
        degrees, minutes, seconds = (float(part) for part in dms)
    except (TypeError, ValueError):
        return None

    decimal = degrees + minutes / 60 + seconds / 3600
    if ref in ("S", "W"):
        decimal = -decimal
    return round(decimal, 7)


def _named_tags(tags: dict[int, Any], names: dict[int, str]) -> dict[str, Any]:
    return {
        names.get(tag_id, str(tag_id)): make_json_safe(value)
        for tag_id, value in tags.items()
        if tag_id not in _IFD_POINTERS
    }


def read_exif(file_path: str) -> dict[str, Any] | None:
    """Read EXIF tags from an image.

    Returns:
        Tags grouped by IFD, or None if the image carries no EXIF data
    """
    with Image.open(file_path) as image:
        exif = image.getexif()
        if not exif:
            return None

        output: dict[str, Any] = {"IFD0": _named_tags(dict(exif), ExifTags.TAGS)}

        exif_ifd = exif.get_ifd(ExifTags.IFD.Exif)
        if exif_ifd:
            output["EXIF"] = _named_tags(exif_ifd, ExifTags.TAGS)

        gps_ifd = exif.get_ifd(ExifTags.IFD.GPSInfo)
        if gps_ifd:
            gps = _named_tags(gps_ifd, ExifTags.GPSTAGS)
            latitude = dms_to_decimal(gps.get("GPSLatitude"), gps.get("GPSLatitudeRef"))
            longitude = dms_to_decimal(gps.get("GPSLongitude"), gps.get("GPSLongitudeRef"))
            if latitude is not None and longitude is not None:
                gps["Latitude"] = latitude
                gps["Longitude"] = longitude
            output["GPS"] = gps

    return output


class PillowExifService(ExtractionService):
    """EXIF tags embedded in JPEG/TIFF images."""

    key = "pillow_exif"

    def _extract(self, file_path: str) -> dict[str, Any] | None:
        return read_exif(file_path)


register_service(
    SERVICE_TYPE,
    PillowExifService.key,
    PillowExifService,
    subtypes=[SUBTYPE_EXIF],
)
