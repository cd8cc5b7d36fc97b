"""Extraction service registry.

Backends register themselves per service type (capability name) with the
subtypes they serve. Lookups return a fresh instance of the best available
backend for a subtype, skipping backends already used in the current chain.

To add a new backend:
1. Create a new module (e.g., pdfinfo.py)
2. Subclass ExtractionService and implement _extract()
3. Register it using: register_service(SERVICE_TYPE, "pdfinfo", PdfInfoService, subtypes=[...])
4. Import the module in __init__.py to trigger registration
5. Ship a mapping document under mappings/pdfinfo/
"""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from .base import ExtractionService

logger = logging.getLogger(__name__)

# Capability name of metadata extraction services
SERVICE_TYPE = "metaExtract"

DEFAULT_PRIORITY = 50


def normalize_subtype(subtype: str) -> str:
    """Normalize a subtype or extension for lookups ("JPG", ".jpg" -> "jpg")."""
    return subtype.strip().lstrip(".").lower()


def _always_available() -> bool:
    return True


@dataclass
class ServiceRegistration:
    """A backend known to the registry."""

    service_type: str
    key: str
    factory: Callable[[], ExtractionService]
    subtypes: frozenset[str]
    priority: int = DEFAULT_PRIORITY
    is_available: Callable[[], bool] = field(default=_always_available)

    def serves(self, subtype: str) -> bool:
        return normalize_subtype(subtype) in self.subtypes

    def check_available(self) -> bool:
        try:
            return bool(self.is_available())
        except Exception as e:
            logger.warning(f"Availability check for service {self.key} failed: {e}")
            return False


class ServiceRegistry:
    """Priority-ordered registry of extraction services."""

    def __init__(self) -> None:
        self._registrations: list[ServiceRegistration] = []

    def register(
        self,
        service_type: str,
        key: str,
        factory: Callable[[], ExtractionService],
        subtypes: Iterable[str],
        priority: int = DEFAULT_PRIORITY,
        is_available: Callable[[], bool] | None = None,
    ) -> ServiceRegistration:
        """Register a service.

        Args:
            service_type: Capability name (e.g., "metaExtract")
            key: Stable service key, also the mapping directory name
            factory: Zero-argument callable returning a new service instance
            subtypes: Subtypes served (file extensions or ids like "image:exif")
            priority: 1-100, higher is tried first
            is_available: Optional probe (e.g., binary on PATH)
        """
        registration = ServiceRegistration(
            service_type=service_type,
            key=key,
            factory=factory,
            subtypes=frozenset(normalize_subtype(s) for s in subtypes),
            priority=priority,
            is_available=is_available or _always_available,
        )
        self._registrations.append(registration)
        logger.debug(f"Registered {service_type} service: {key} (priority {priority})")
        return registration

    def candidates(self, service_type: str, subtype: str) -> list[ServiceRegistration]:
        """Registrations serving a subtype, best first (ties keep registration order)."""
        matching = [
            r for r in self._registrations
            if r.service_type == service_type and r.serves(subtype)
        ]
        return sorted(matching, key=lambda r: r.priority, reverse=True)

    def find_service(
        self, service_type: str, subtype: str, exclude: Iterable[str] = ()
    ) -> ExtractionService | None:
        """Instantiate the next available service for a subtype.

        Args:
            service_type: Capability name
            subtype: Subtype to serve
            exclude: Keys of services already used

        Returns:
            New service instance, or None if no further service is available
        """
        excluded = set(exclude)

        for registration in self.candidates(service_type, subtype):
            if registration.key in excluded:
                continue
            if not registration.check_available():
                continue
            try:
                service = registration.factory()
            except Exception as e:
                logger.warning(f"Service {registration.key} failed to initialize: {e}")
                continue

            if service is None:
                logger.warning(f"Service {registration.key} factory returned no instance")
                continue

            # The registration key drives exclusion and mapping lookup
            service.key = registration.key
            return service

        return None

    def has_service(self, service_type: str, subtype: str) -> bool:
        """Check whether any available service serves a subtype."""
        return any(r.check_available() for r in self.candidates(service_type, subtype))

    def list_services(self) -> list[ServiceRegistration]:
        """List all registrations in registration order."""
        return list(self._registrations)


# Default registry, populated by importing extraction_bridge.services
default_registry = ServiceRegistry()


def register_service(
    service_type: str,
    key: str,
    factory: Callable[[], ExtractionService],
    subtypes: Iterable[str],
    priority: int = DEFAULT_PRIORITY,
    is_available: Callable[[], bool] | None = None,
) -> ServiceRegistration:
    """Register a service with the default registry."""
    return default_registry.register(
        service_type, key, factory, subtypes, priority=priority, is_available=is_available
    )
