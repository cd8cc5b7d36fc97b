"""Metadata extraction services.

Each backend module registers itself with the default registry on import.
The order of imports determines the order among services of equal priority.
"""

# Import backend modules to trigger registration
from . import (
    exif,  # noqa: F401
    ffprobe,  # noqa: F401
    image,  # noqa: F401
    iptc,  # noqa: F401
)
from .base import ExtractionService
from .registry import (
    SERVICE_TYPE,
    ServiceRegistration,
    ServiceRegistry,
    default_registry,
    normalize_subtype,
    register_service,
)

__all__ = [
    "SERVICE_TYPE",
    "ExtractionService",
    "ServiceRegistration",
    "ServiceRegistry",
    "default_registry",
    "normalize_subtype",
    "register_service",
]
