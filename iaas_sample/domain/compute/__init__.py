"""Compute domain: value objects, requests and templates."""

from .provision_request import ProvisionRequest
from .template import DEFAULT_INBOUND_PORTS, PAYLOAD_KEY, Template, TemplateOptions
from .value_objects import (
    Credentials,
    HardwareProfile,
    Image,
    InstanceDescriptor,
    InstanceStatus,
    Location,
    OperatingSystem,
    OsFamily,
)

__all__ = [
    "Credentials",
    "DEFAULT_INBOUND_PORTS",
    "HardwareProfile",
    "Image",
    "InstanceDescriptor",
    "InstanceStatus",
    "Location",
    "OperatingSystem",
    "OsFamily",
    "PAYLOAD_KEY",
    "ProvisionRequest",
    "Template",
    "TemplateOptions",
]
