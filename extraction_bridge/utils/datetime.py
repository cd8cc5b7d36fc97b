"""Date/time normalization for extracted metadata."""

import logging
import re
from datetime import datetime, timezone

logger = logging.getLogger(__name__)

# Format returned when reading EXIF, e.g. "2014:03:02 10:11:12"
EXIF_DATETIME_PATTERN = re.compile(r"^\d{4}:\d{2}:\d{2} \d{2}:\d{2}:\d{2}$")

# Tried in order after ISO 8601 parsing fails
DATETIME_FORMATS = [
    "%Y/%m/%d %H:%M:%S",
    "%Y-%m-%d %H:%M:%S",
    "%Y/%m/%d %H:%M",
    "%Y-%m-%d %H:%M",
    "%Y/%m/%d",
    "%Y-%m-%d",
    "%Y%m%d",  # IPTC DateCreated
    "%d.%m.%Y %H:%M:%S",
    "%d.%m.%Y",
    "%a, %d %b %Y %H:%M:%S %z",  # RFC 2822 (PDF/mail producers)
    "%d %B %Y",
    "%B %d, %Y",
]


def _parse(text: str) -> datetime | None:
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass

    for fmt in DATETIME_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue

    return None


def to_timestamp(text: str | None) -> int | None:
    """Convert a date/time string into its Unix timestamp.

    EXIF-style "YYYY:MM:DD HH:MM:SS" values have their date separators
    rewritten before parsing. Naive values are taken as UTC.

    Returns:
        Unix timestamp, or None when the value cannot be parsed
    """
    if not isinstance(text, str):
        return None

    value = text.strip()
    if EXIF_DATETIME_PATTERN.match(value):
        date_part, time_part = value.split(" ", 1)
        value = f"{date_part.replace(':', '/')} {time_part}"

    parsed = _parse(value)
    if parsed is None:
        logger.debug(f"Could not parse date/time: {text!r}")
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)

    return int(parsed.timestamp())
