"""Mapping document loading.

A mapping document translates the raw output of one backend into canonical
attribute keys. Documents are looked up per backend key and subtype:

    <mapping dir>/<service key>/<subtype, ':' replaced by '_'>.json
    <mapping dir>/<service key>/default.json

Every configured mapping directory is searched for the subtype document
before any default document is considered.
"""

import logging
from collections.abc import Iterable
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from extraction_bridge.schemas import MappingRule

logger = logging.getLogger(__name__)

DEFAULT_MAPPING_NAME = "default"

MappingDocument = list[MappingRule]

_document_adapter: TypeAdapter[MappingDocument] = TypeAdapter(MappingDocument)


def mapping_filename(subtype: str) -> str:
    """Get the mapping file name for a subtype (e.g. "image:exif" -> "image_exif.json")."""
    return subtype.replace(":", "_") + ".json"


def parse_mapping(content: str | bytes) -> MappingDocument | None:
    """Parse a mapping document.

    Returns:
        List of rules, or None if the content is not a valid document
    """
    try:
        return _document_adapter.validate_json(content)
    except ValidationError as e:
        logger.warning(f"Invalid mapping document: {e.error_count()} error(s), first: {e.errors()[0]['msg']}")
        return None


class MappingLoader:
    """Locates and parses mapping documents on a search path."""

    def __init__(self, search_dirs: Iterable[Path | str]):
        self.search_dirs = [Path(d) for d in search_dirs]

    def find(self, service_key: str, subtype: str) -> Path | None:
        """Find the mapping file for a backend and subtype, falling back to default.json."""
        for filename in (mapping_filename(subtype), f"{DEFAULT_MAPPING_NAME}.json"):
            for directory in self.search_dirs:
                path = directory / service_key / filename
                if path.is_file():
                    return path
        return None

    def load(self, service_key: str, subtype: str) -> MappingDocument | None:
        """Load the mapping document for a backend and subtype.

        Returns:
            Parsed rules, or None when no document exists or it fails to parse
        """
        path = self.find(service_key, subtype)
        if path is None:
            logger.debug(f"No mapping for service {service_key} ({subtype})")
            return None

        try:
            content = path.read_bytes()
        except OSError as e:
            logger.warning(f"Failed to read mapping {path}: {e}")
            return None

        document = parse_mapping(content)
        if document is None:
            logger.warning(f"Ignoring malformed mapping {path}")
        return document
