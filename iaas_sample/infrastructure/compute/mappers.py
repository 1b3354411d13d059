"""Translation of libcloud compute objects into domain value objects."""
import re
from typing import Any, Dict, Optional

from libcloud.compute.base import Node, NodeImage, NodeLocation, NodeSize
from libcloud.compute.types import NodeState

from iaas_sample.domain.compute import (
    HardwareProfile,
    Image,
    InstanceDescriptor,
    InstanceStatus,
    Location,
    OperatingSystem,
)

_STATUS_MAP = {
    NodeState.RUNNING: InstanceStatus.RUNNING,
    NodeState.REBOOTING: InstanceStatus.RUNNING,
    NodeState.RECONFIGURING: InstanceStatus.RUNNING,
    NodeState.UPDATING: InstanceStatus.RUNNING,
    NodeState.PENDING: InstanceStatus.PENDING,
    NodeState.STARTING: InstanceStatus.PENDING,
    NodeState.MIGRATING: InstanceStatus.PENDING,
    NodeState.STOPPING: InstanceStatus.SUSPENDED,
    NodeState.STOPPED: InstanceStatus.SUSPENDED,
    NodeState.SUSPENDED: InstanceStatus.SUSPENDED,
    NodeState.PAUSED: InstanceStatus.SUSPENDED,
    NodeState.TERMINATED: InstanceStatus.TERMINATED,
    NodeState.ERROR: InstanceStatus.ERROR,
}

_HARDWARE_ID_PATTERN = re.compile(r"^\s*\w+\s*=\s*[^,]+(\s*,\s*\w+\s*=\s*[^,]+)*\s*$")


def parse_hardware_id(hardware_id: str) -> Dict[str, str]:
    """
    Split a ``key=value`` hardware id into its parts.

    SoftLayer style ids look like ``cpu=1,memory=4096,disk=25,type=SAN``.
    Ids of any other shape yield an empty dict.
    """
    if not hardware_id or not _HARDWARE_ID_PATTERN.match(hardware_id):
        return {}
    parts = {}
    for item in hardware_id.split(","):
        key, _, value = item.partition("=")
        parts[key.strip().lower()] = value.strip()
    return parts


def _to_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return None


def _to_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def to_status(state: Any) -> InstanceStatus:
    return _STATUS_MAP.get(state, InstanceStatus.UNRECOGNIZED)


def to_location(location: NodeLocation) -> Location:
    driver_name = getattr(location.driver, "name", None)
    if not isinstance(driver_name, str):
        driver_name = None
    return Location(
        id=str(location.id),
        name=location.name,
        country=location.country,
        provider=driver_name,
    )


def to_hardware_profile(size: NodeSize) -> HardwareProfile:
    extra = size.extra or {}
    parsed = parse_hardware_id(str(size.id))
    cpus = extra.get("cpus", extra.get("vcpus", extra.get("cpu", parsed.get("cpu"))))
    return HardwareProfile(
        id=str(size.id),
        name=size.name,
        cpus=_to_int(cpus),
        memory_mb=_to_int(size.ram if size.ram is not None else parsed.get("memory")),
        disk_gb=_to_int(size.disk if size.disk is not None else parsed.get("disk")),
        storage_type=extra.get("storage_type", parsed.get("type")),
        price=_to_float(size.price),
    )


def _operating_system_text(image: Optional[NodeImage], extra: Dict[str, Any]) -> Optional[str]:
    for key in ("os", "operating_system", "os_type", "description"):
        value = extra.get(key)
        if isinstance(value, str) and value:
            return value
    if image is not None:
        image_extra = image.extra or {}
        description = image_extra.get("description") or image_extra.get("os")
        if isinstance(description, str) and description:
            return description
        return image.name or str(image.id)
    return None


def to_image(image: NodeImage) -> Image:
    return Image(
        id=str(image.id),
        name=image.name,
        operating_system=OperatingSystem.from_description(
            _operating_system_text(image, {})
        ),
    )


def to_instance(node: Node, group: Optional[str] = None) -> InstanceDescriptor:
    extra = node.extra or {}
    image = node.image if isinstance(node.image, NodeImage) else None
    location = extra.get("location") or extra.get("datacenter") or extra.get("availability")
    if isinstance(location, NodeLocation):
        location = location.id
    return InstanceDescriptor(
        id=str(node.id),
        name=node.name,
        operating_system=OperatingSystem.from_description(
            _operating_system_text(image, extra)
        ),
        status=to_status(node.state),
        public_ips=[ip for ip in (node.public_ips or []) if ip],
        private_ips=[ip for ip in (node.private_ips or []) if ip],
        location_id=str(location) if location is not None else None,
        group=group if group is not None else extra.get("group"),
    )
