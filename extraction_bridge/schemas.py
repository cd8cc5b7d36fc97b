"""Pydantic schemas for mapping documents and request/response models."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# === Mapping Documents ===


class MappingRule(BaseModel):
    """One rule of a mapping document.

    Serialized as {"FAL": "<canonical key>", "DATA": "<expr>" | ["<expr>", ...]}.
    """

    model_config = ConfigDict(populate_by_name=True)

    target: str = Field(alias="FAL")
    sources: list[str] = Field(alias="DATA")

    @field_validator("sources", mode="before")
    @classmethod
    def wrap_single_source(cls, value: Any) -> Any:
        """Accept a single source expression as well as a list of them."""
        if isinstance(value, str):
            return [value]
        return value


# === Request Models ===


class ExtractRequest(BaseModel):
    """Request body for POST /extract endpoint."""

    file: str  # Local path of the file to extract metadata from


# === Response Models ===


class ExtractResponse(BaseModel):
    """Response from POST /extract endpoint."""

    file: str
    extension: str
    subtypes: list[str]
    metadata: dict[str, Any]
    extraction_time_seconds: float


class SubtypesResponse(BaseModel):
    """Response from GET /subtypes endpoint."""

    extension: str
    subtypes: list[str]
    can_process: bool


class CapabilitiesResponse(BaseModel):
    """Static capabilities used by callers to pick an extractor."""

    file_type_restrictions: list[str]
    driver_restrictions: list[str]
    priority: int
    execution_priority: int


class ServiceInfo(BaseModel):
    """A registered extraction backend."""

    key: str
    service_type: str
    subtypes: list[str]
    priority: int
    available: bool


class ServicesResponse(BaseModel):
    """Response from GET /services endpoint."""

    services: list[ServiceInfo]


class HealthResponse(BaseModel):
    """Response from /health endpoint."""

    status: str
    version: str
    api_version: str


class SettingsResponse(BaseModel):
    """Response from GET /settings endpoint."""

    # API settings
    api_version: str
    log_level: str

    # Mapping documents
    mapping_dirs: list[str]

    # Subtype resolution
    image_extensions: list[str]

    # Backend settings
    ffprobe_timeout: int

    # Temp directory
    temp_dir: str


class SettingsUpdate(BaseModel):
    """Request body for PUT /settings endpoint.

    All fields are optional - only provided fields are updated.
    """

    log_level: str | None = None
    mapping_dirs: list[str] | None = None
    image_extensions: list[str] | None = None
    ffprobe_timeout: int | None = None
    temp_dir: str | None = None
