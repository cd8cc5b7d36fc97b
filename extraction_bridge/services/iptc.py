"""Embedded IPTC (IIM) metadata via Pillow (subtype "image:iptc").

Raw output is keyed by IIM dataset name:

    {"ObjectName": "...", "Caption-Abstract": "...", "Keywords": ["a", "b"]}
"""

import logging
from typing import Any

from PIL import Image, IptcImagePlugin

from .base import ExtractionService, make_json_safe
from .registry import SERVICE_TYPE, register_service

logger = logging.getLogger(__name__)

SUBTYPE_IPTC = "image:iptc"

# Application record (2) datasets
IPTC_DATASETS: dict[tuple[int, int], str] = {
    (2, 5): "ObjectName",
    (2, 10): "Urgency",
    (2, 15): "Category",
    (2, 20): "SupplementalCategories",
    (2, 25): "Keywords",
    (2, 40): "SpecialInstructions",
    (2, 55): "DateCreated",
    (2, 60): "TimeCreated",
    (2, 80): "By-line",
    (2, 85): "By-lineTitle",
    (2, 90): "City",
    (2, 92): "Sub-location",
    (2, 95): "Province-State",
    (2, 100): "Country-PrimaryLocationCode",
    (2, 101): "Country-PrimaryLocationName",
    (2, 103): "OriginalTransmissionReference",
    (2, 105): "Headline",
    (2, 110): "Credit",
    (2, 115): "Source",
    (2, 116): "CopyrightNotice",
    (2, 118): "Contact",
    (2, 120): "Caption-Abstract",
    (2, 122): "Writer-Editor",
}

# Datasets that may occur several times; always returned as lists
REPEATABLE_DATASETS = {"SupplementalCategories", "Keywords", "By-line", "By-lineTitle", "Contact", "Writer-Editor"}


def decode_iptc(info: dict[tuple[int, int], Any]) -> dict[str, Any]:
    """Decode Pillow's raw IPTC dictionary into named datasets."""
    output: dict[str, Any] = {}

    for dataset, raw in info.items():
        name = IPTC_DATASETS.get(dataset)
        if name is None:
            continue

        values = [make_json_safe(v) for v in (raw if isinstance(raw, list) else [raw])]
        if name in REPEATABLE_DATASETS or len(values) > 1:
            output[name] = values
        else:
            output[name] = values[0]

    return output


def read_iptc(file_path: str) -> dict[str, Any] | None:
    """Read IPTC datasets from an image.

    Returns:
        Named datasets, or None if the image carries no IPTC block
    """
    with Image.open(file_path) as image:
        info = IptcImagePlugin.getiptcinfo(image)

    if not info:
        return None
    return decode_iptc(info)


class PillowIptcService(ExtractionService):
    """IPTC datasets embedded in JPEG/TIFF images."""

    key = "pillow_iptc"

    def _extract(self, file_path: str) -> dict[str, Any] | None:
        return read_iptc(file_path)


register_service(
    SERVICE_TYPE,
    PillowIptcService.key,
    PillowIptcService,
    subtypes=[SUBTYPE_IPTC],
)
