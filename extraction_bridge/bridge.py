"""Bridge between metadata extraction services and the host's file index.

For a file, the bridge resolves which service subtypes apply to its
extension, runs the chain of available services for every subtype, remaps
each service's raw output through its mapping document and folds all
results into one canonical attribute set.

Precedence: within a subtype, services that run earlier in the chain win
conflicting keys; across subtypes, the subtype resolved first wins.

Usage:
    from extraction_bridge.bridge import get_bridge
    from extraction_bridge.files import LocalFile

    metadata = get_bridge().extract_metadata(LocalFile("/path/to/photo.jpg"))
"""

import logging
import threading
from collections.abc import Iterable
from typing import Any

from extraction_bridge.config import DEFAULT_IMAGE_EXTENSIONS, get_settings
from extraction_bridge.files import FileDescriptor
from extraction_bridge.mapping import MappingLoader
from extraction_bridge.merge import merge_precedence
from extraction_bridge.remap import remap_output
from extraction_bridge.services import (
    SERVICE_TYPE,
    ExtractionService,
    ServiceRegistry,
    default_registry,
    normalize_subtype,
)
from extraction_bridge.services.exif import SUBTYPE_EXIF
from extraction_bridge.services.iptc import SUBTYPE_IPTC

logger = logging.getLogger(__name__)

# Alternative subtypes probed for image extensions, in precedence order
IMAGE_SUBTYPES = (SUBTYPE_IPTC, SUBTYPE_EXIF)

# Static capabilities reported to callers choosing an extractor
DRIVER_RESTRICTIONS = ("Local",)
PRIORITY = 50
EXECUTION_PRIORITY = 50


class SubtypeCache:
    """Process-lifetime cache of resolved subtypes per extension.

    Service availability does not change while the process runs, so entries
    are never invalidated. Concurrent misses only recompute the same value.
    """

    def __init__(self) -> None:
        self._entries: dict[str, tuple[str, ...]] = {}

    def get(self, extension: str) -> tuple[str, ...] | None:
        return self._entries.get(extension)

    def set(self, extension: str, subtypes: tuple[str, ...]) -> None:
        self._entries[extension] = subtypes

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class SubtypeResolver:
    """Determines which service subtypes apply to a file extension."""

    def __init__(
        self,
        registry: ServiceRegistry,
        cache: SubtypeCache | None = None,
        image_extensions: Iterable[str] = DEFAULT_IMAGE_EXTENSIONS,
        service_type: str = SERVICE_TYPE,
    ):
        self.registry = registry
        self.cache = cache if cache is not None else SubtypeCache()
        self.image_extensions = frozenset(normalize_subtype(e) for e in image_extensions)
        self.service_type = service_type

    def resolve(self, extension: str) -> tuple[str, ...]:
        """Get the subtypes with an available service, in precedence order.

        The extension's own subtype comes first, followed by the embedded
        IPTC and EXIF subtypes for recognized image extensions.
        """
        extension = normalize_subtype(extension or "")

        cached = self.cache.get(extension)
        if cached is not None:
            return cached

        subtypes: list[str] = []
        if extension and self.registry.has_service(self.service_type, extension):
            subtypes.append(extension)

        if extension in self.image_extensions:
            for subtype in IMAGE_SUBTYPES:
                if self.registry.has_service(self.service_type, subtype):
                    subtypes.append(subtype)

        resolved = tuple(subtypes)
        self.cache.set(extension, resolved)
        logger.debug(f"Resolved subtypes for '{extension}': {list(resolved)}")
        return resolved


class ServiceChain:
    """Runs every available service of one subtype against a file."""

    def __init__(
        self,
        registry: ServiceRegistry,
        mapping_loader: MappingLoader,
        service_type: str = SERVICE_TYPE,
    ):
        self.registry = registry
        self.mapping_loader = mapping_loader
        self.service_type = service_type

    def run(self, file: FileDescriptor, subtype: str) -> dict[str, Any]:
        """Extract canonical metadata for one subtype.

        Each service is used at most once. Services without a mapping
        document, failing services and services without output contribute
        nothing.

        Returns:
            Merged attribute set (earlier services win conflicts)
        """
        data: dict[str, Any] = {}
        chain: tuple[str, ...] = ()

        while (service := self.registry.find_service(self.service_type, subtype, exclude=chain)) is not None:
            key = service.get_service_key()
            if key in chain:
                logger.error(f"Service {key} returned twice for {subtype}, stopping chain")
                break
            chain = (*chain, key)

            mapping = self.mapping_loader.load(key, subtype)
            if mapping is None:
                continue

            output = self._invoke(service, file)
            if output is None:
                continue

            try:
                remapped = remap_output(output, mapping)
                # Existing data has precedence over data from later services
                data = merge_precedence(data, remapped)
            except Exception as e:
                logger.warning(f"Could not remap output of service {key} ({subtype}): {e}")
                continue

            logger.debug(f"Service {key} ({subtype}) contributed {sorted(remapped)}")

        return data

    def _invoke(self, service: ExtractionService, file: FileDescriptor) -> dict[str, Any] | None:
        key = service.get_service_key()
        try:
            file_path = file.get_for_local_processing(False)
            service.set_input_file(file_path, file.get_property("extension"))
            if not service.process():
                return None
            output = service.get_output()
        except Exception as e:
            logger.warning(f"Service {key} could not process {file!r}: {e}")
            return None

        if not isinstance(output, dict):
            return None
        return output


class ExtractionBridge:
    """Metadata extractor combining all services applicable to a file."""

    def __init__(
        self,
        registry: ServiceRegistry,
        mapping_loader: MappingLoader,
        resolver: SubtypeResolver | None = None,
    ):
        self.registry = registry
        self.resolver = resolver or SubtypeResolver(registry)
        self.chain = ServiceChain(registry, mapping_loader)

    def get_file_type_restrictions(self) -> list[str]:
        """Supported file types (empty means all)."""
        return []

    def get_driver_restrictions(self) -> list[str]:
        """Supported storage drivers (services need a local file)."""
        return list(DRIVER_RESTRICTIONS)

    def get_priority(self) -> int:
        """Data priority among extractors handling the same file (1-100)."""
        return PRIORITY

    def get_execution_priority(self) -> int:
        """Execution priority among extractors (1-100, 100 runs first)."""
        return EXECUTION_PRIORITY

    def get_subtypes(self, file: FileDescriptor) -> tuple[str, ...]:
        return self.resolver.resolve(file.get_property("extension"))

    def can_process(self, file: FileDescriptor) -> bool:
        """Check if any service subtype applies to the file."""
        return len(self.get_subtypes(file)) > 0

    def extract_metadata(self, file: FileDescriptor) -> dict[str, Any]:
        """Extract canonical metadata from a file.

        Returns:
            Attribute set merged over all subtypes (empty if nothing applies)
        """
        metadata: dict[str, Any] = {}

        for subtype in self.get_subtypes(file):
            data = self.chain.run(file, subtype)

            # Existing data has precedence, subtypes are resolved in precedence order
            metadata = merge_precedence(metadata, data)

        return metadata


# Process-wide bridge instance
_bridge: ExtractionBridge | None = None
_bridge_lock = threading.Lock()


def create_bridge(registry: ServiceRegistry | None = None) -> ExtractionBridge:
    """Create a bridge configured from settings."""
    settings = get_settings()
    registry = registry or default_registry
    resolver = SubtypeResolver(registry, image_extensions=settings.image_extensions)
    loader = MappingLoader(settings.get_mapping_dirs())
    return ExtractionBridge(registry, loader, resolver)


def get_bridge() -> ExtractionBridge:
    """Get the process-wide bridge (created on first call)."""
    global _bridge

    with _bridge_lock:
        if _bridge is None:
            _bridge = create_bridge()
        return _bridge


def reset_bridge() -> None:
    """Drop the process-wide bridge (e.g. after settings changed)."""
    global _bridge

    with _bridge_lock:
        _bridge = None
