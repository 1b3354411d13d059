"""Caller-built request consumed by instance creation."""
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from .value_objects import OsFamily


class ProvisionRequest(BaseModel):
    """Everything needed to create a single instance."""
    model_config = ConfigDict(frozen=True)

    image_id: str
    location_id: str
    hardware_id: str
    os_family: OsFamily
    os_version: Optional[str] = None
    domain_name: Optional[str] = None
    host_name: str
    metadata_payload: Optional[str] = None

    @field_validator("os_family", mode="before")
    @classmethod
    def parse_os_family(cls, v):
        """Accept family names in any case."""
        if isinstance(v, str) and not isinstance(v, OsFamily):
            return OsFamily.parse(v)
        return v

    @field_validator("host_name", "image_id", "location_id", "hardware_id")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Identifiers and host name must be non-blank and used exactly as given."""
        if not v or not v.strip():
            raise ValueError("must not be empty")
        if v != v.strip():
            raise ValueError("must not have leading or trailing whitespace")
        return v
