"""Metadata extraction endpoints."""

import asyncio
import logging
import time
from pathlib import Path

from fastapi import APIRouter, HTTPException

from extraction_bridge.bridge import get_bridge
from extraction_bridge.files import LocalFile
from extraction_bridge.schemas import (
    CapabilitiesResponse,
    ExtractRequest,
    ExtractResponse,
    ServiceInfo,
    ServicesResponse,
    SubtypesResponse,
)

router = APIRouter(tags=["extract"])
logger = logging.getLogger(__name__)


@router.post("/extract", response_model=ExtractResponse)
async def extract(request: ExtractRequest):
    """Extract canonical metadata from a local file.

    Every applicable service runs; files no service applies to yield an
    empty metadata object rather than an error.
    """
    if not Path(request.file).is_file():
        raise HTTPException(status_code=404, detail=f"File not found: {request.file}")

    bridge = get_bridge()
    file = LocalFile(request.file)

    start_time = time.perf_counter()
    # Services may shell out; keep the event loop free
    subtypes = await asyncio.to_thread(bridge.get_subtypes, file)
    metadata = await asyncio.to_thread(bridge.extract_metadata, file)
    elapsed = time.perf_counter() - start_time

    logger.info(f"Extracted {len(metadata)} attributes from {file.path.name} in {elapsed:.2f}s")

    return ExtractResponse(
        file=request.file,
        extension=file.extension,
        subtypes=list(subtypes),
        metadata=metadata,
        extraction_time_seconds=round(elapsed, 3),
    )


@router.get("/subtypes", response_model=SubtypesResponse)
async def subtypes(extension: str):
    """Get the service subtypes applicable to a file extension."""
    resolved = get_bridge().resolver.resolve(extension)
    return SubtypesResponse(
        extension=extension,
        subtypes=list(resolved),
        can_process=len(resolved) > 0,
    )


@router.get("/capabilities", response_model=CapabilitiesResponse)
async def capabilities():
    """Get the static restrictions and priorities of the extractor."""
    bridge = get_bridge()
    return CapabilitiesResponse(
        file_type_restrictions=bridge.get_file_type_restrictions(),
        driver_restrictions=bridge.get_driver_restrictions(),
        priority=bridge.get_priority(),
        execution_priority=bridge.get_execution_priority(),
    )


@router.get("/services", response_model=ServicesResponse)
async def services():
    """List registered extraction services and whether they are available."""
    registrations = get_bridge().registry.list_services()
    return ServicesResponse(
        services=[
            ServiceInfo(
                key=r.key,
                service_type=r.service_type,
                subtypes=sorted(r.subtypes),
                priority=r.priority,
                available=r.check_available(),
            )
            for r in registrations
        ]
    )
