"""Provider-neutral description of how to create an instance."""
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .provision_request import ProvisionRequest
from .value_objects import OsFamily

# User metadata key the provisioning payload is attached under.
PAYLOAD_KEY = "PAYLOAD"

DEFAULT_INBOUND_PORTS: Tuple[int, ...] = (22, 80)


class TemplateOptions(BaseModel):
    """Per-node options applied on top of image, size and location."""
    model_config = ConfigDict(frozen=True)

    domain_name: Optional[str] = None
    node_names: List[str] = Field(default_factory=list)
    inbound_ports: Tuple[int, ...] = DEFAULT_INBOUND_PORTS
    user_metadata: Dict[str, str] = Field(default_factory=dict)


class Template(BaseModel):
    """Image, hardware and location selection plus template options."""
    model_config = ConfigDict(frozen=True)

    image_id: str
    location_id: str
    hardware_id: str
    os_family: OsFamily = OsFamily.UNRECOGNIZED
    os_version_pattern: Optional[str] = None
    options: TemplateOptions = Field(default_factory=TemplateOptions)

    @classmethod
    def from_request(
        cls,
        request: ProvisionRequest,
        inbound_ports: Tuple[int, ...] = DEFAULT_INBOUND_PORTS,
    ) -> "Template":
        """Build a template naming the requested host as its only node."""
        user_metadata = {}
        if request.metadata_payload is not None:
            user_metadata[PAYLOAD_KEY] = request.metadata_payload

        return cls(
            image_id=request.image_id,
            location_id=request.location_id,
            hardware_id=request.hardware_id,
            os_family=request.os_family,
            os_version_pattern=request.os_version,
            options=TemplateOptions(
                domain_name=request.domain_name,
                node_names=[request.host_name],
                inbound_ports=tuple(inbound_ports),
                user_metadata=user_metadata,
            ),
        )
