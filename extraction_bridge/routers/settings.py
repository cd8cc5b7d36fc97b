"""Settings endpoints."""

import logging

from fastapi import APIRouter

from extraction_bridge.bridge import reset_bridge
from extraction_bridge.config import Settings, get_settings, reload_settings, save_config_to_file
from extraction_bridge.schemas import SettingsResponse, SettingsUpdate

router = APIRouter(tags=["settings"])
logger = logging.getLogger(__name__)


def _to_response(settings: Settings) -> SettingsResponse:
    return SettingsResponse(
        api_version=settings.api_version,
        log_level=settings.log_level,
        mapping_dirs=settings.mapping_dirs,
        image_extensions=settings.image_extensions,
        ffprobe_timeout=settings.ffprobe_timeout,
        temp_dir=settings.temp_dir,
    )


@router.get("/settings", response_model=SettingsResponse)
async def get_settings_endpoint():
    """Get current settings."""
    return _to_response(get_settings())


@router.put("/settings", response_model=SettingsResponse)
async def update_settings(update: SettingsUpdate):
    """Update settings.

    Only provided fields are updated. Changes are persisted to config file
    and the bridge is rebuilt so new mapping directories take effect.
    """
    settings = get_settings()

    # Update only provided fields
    update_data = update.model_dump(exclude_unset=True, exclude_none=True)

    for field, value in update_data.items():
        setattr(settings, field, value)

    # Save to config file
    save_config_to_file(settings)

    # Reload to ensure consistency
    new_settings = reload_settings()
    reset_bridge()

    logger.info(f"Settings updated: {list(update_data.keys())}")

    return _to_response(new_settings)
