from typing import List, Optional

import pytest

from iaas_sample.application import ProvisioningClient
from iaas_sample.domain.base.ports import ComputeServicePort
from iaas_sample.domain.compute import (
    HardwareProfile,
    Image,
    InstanceDescriptor,
    InstanceStatus,
    Location,
    OperatingSystem,
    ProvisionRequest,
    Template,
)
from iaas_sample.domain.core.exceptions import InstanceNotFoundError


class FakeComputeService(ComputeServicePort):
    """In-memory compute service that records every call."""

    def __init__(self, nodes: Optional[List[InstanceDescriptor]] = None):
        self.nodes: List[InstanceDescriptor] = list(nodes or [])
        self.locations = [Location(id="dal01", name="Dallas 1", country="US")]
        self.hardware = [
            HardwareProfile(id="cpu=1,memory=4096,disk=25,type=SAN", cpus=1,
                            memory_mb=4096, disk_gb=25, storage_type="SAN")
        ]
        self.images = [
            Image(id="UBUNTU_12_64", name="Ubuntu 12.04 64 bit",
                  operating_system=OperatingSystem.from_description("UBUNTU_12_64"))
        ]
        self.list_nodes_calls = 0
        self.create_calls: List[tuple] = []
        self.destroy_calls: List[str] = []
        self.fail_with: Optional[Exception] = None
        self._next_id = 100

    def _maybe_fail(self):
        if self.fail_with is not None:
            raise self.fail_with

    def list_assignable_locations(self) -> List[Location]:
        self._maybe_fail()
        return list(self.locations)

    def list_hardware_profiles(self) -> List[HardwareProfile]:
        self._maybe_fail()
        return list(self.hardware)

    def list_images(self) -> List[Image]:
        self._maybe_fail()
        return list(self.images)

    def list_nodes(self) -> List[InstanceDescriptor]:
        self._maybe_fail()
        self.list_nodes_calls += 1
        return list(self.nodes)

    def create_nodes_in_group(self, group: str, count: int, template: Template) -> List[InstanceDescriptor]:
        self._maybe_fail()
        self.create_calls.append((group, count, template))
        created = []
        for name in template.options.node_names[:count]:
            self._next_id += 1
            node = InstanceDescriptor(
                id=str(self._next_id),
                name=name,
                status=InstanceStatus.PENDING,
                location_id=template.location_id,
                group=group,
            )
            self.nodes.append(node)
            created.append(node)
        return created

    def destroy_node(self, instance_id: str) -> None:
        self.destroy_calls.append(instance_id)
        self._maybe_fail()
        remaining = [n for n in self.nodes if n.id != instance_id]
        if len(remaining) == len(self.nodes):
            raise InstanceNotFoundError(instance_id)
        self.nodes = remaining


@pytest.fixture
def fake_compute():
    return FakeComputeService(nodes=[InstanceDescriptor(id="1", name="vm-a", status=InstanceStatus.RUNNING)])


@pytest.fixture
def client(fake_compute):
    return ProvisioningClient("user", "api-key", compute_service=fake_compute)


@pytest.fixture
def provision_request():
    def _build(host_name: str = "vm-b", **overrides) -> ProvisionRequest:
        data = {
            "image_id": "UBUNTU_12_64",
            "location_id": "dal01",
            "hardware_id": "cpu=1,memory=4096,disk=25,type=SAN",
            "os_family": "ubuntu",
            "os_version": "12.04",
            "domain_name": "service.com",
            "host_name": host_name,
            "metadata_payload": "A=1234,B=1234,C=1234",
        }
        data.update(overrides)
        return ProvisionRequest(**data)

    return _build
