import pytest
from unittest.mock import Mock

from libcloud.compute.base import Node, NodeImage, NodeLocation, NodeSize
from libcloud.compute.types import NodeState

from iaas_sample.domain.compute import InstanceStatus, OsFamily
from iaas_sample.infrastructure.compute import mappers


@pytest.fixture
def driver():
    driver = Mock()
    driver.name = "SoftLayer"
    return driver


def test_parse_hardware_id():
    assert mappers.parse_hardware_id("cpu=1,memory=4096,disk=25,type=SAN") == {
        "cpu": "1", "memory": "4096", "disk": "25", "type": "SAN",
    }


@pytest.mark.parametrize("hardware_id", ["", "m1.small", "t2.micro,foo"])
def test_parse_hardware_id_other_shapes(hardware_id):
    assert mappers.parse_hardware_id(hardware_id) == {}


def test_to_location(driver):
    location = mappers.to_location(NodeLocation("dal01", "Dallas 1", "US", driver))

    assert location.id == "dal01"
    assert location.name == "Dallas 1"
    assert location.country == "US"
    assert location.provider == "SoftLayer"


def test_to_hardware_profile_from_softlayer_id(driver):
    size = NodeSize("cpu=2,memory=8192,disk=100,type=LOCAL", "2 cpu", None, None, None, 0.25, driver)

    profile = mappers.to_hardware_profile(size)

    assert profile.cpus == 2
    assert profile.memory_mb == 8192
    assert profile.disk_gb == 100
    assert profile.storage_type == "LOCAL"
    assert profile.price == 0.25


def test_to_hardware_profile_prefers_size_fields(driver):
    size = NodeSize("m1", "medium", 2048, 40, None, None, driver, extra={"vcpus": 4})

    profile = mappers.to_hardware_profile(size)

    assert profile.id == "m1"
    assert profile.cpus == 4
    assert profile.memory_mb == 2048
    assert profile.disk_gb == 40
    assert profile.storage_type is None
    assert profile.price is None


def test_to_image_infers_operating_system(driver):
    image = mappers.to_image(NodeImage("UBUNTU_12_64", None, driver))

    assert image.id == "UBUNTU_12_64"
    assert image.operating_system.family == OsFamily.UBUNTU
    assert image.operating_system.version == "12"


def test_to_image_prefers_description(driver):
    image = mappers.to_image(
        NodeImage("1234", "img", driver, extra={"description": "CentOS 6.5 (64 bit)"})
    )
    assert image.operating_system.family == OsFamily.CENTOS
    assert image.operating_system.version == "6.5"


@pytest.mark.parametrize("state,status", [
    (NodeState.RUNNING, InstanceStatus.RUNNING),
    (NodeState.PENDING, InstanceStatus.PENDING),
    (NodeState.STARTING, InstanceStatus.PENDING),
    (NodeState.STOPPED, InstanceStatus.SUSPENDED),
    (NodeState.TERMINATED, InstanceStatus.TERMINATED),
    (NodeState.ERROR, InstanceStatus.ERROR),
    (NodeState.UNKNOWN, InstanceStatus.UNRECOGNIZED),
])
def test_to_status(state, status):
    assert mappers.to_status(state) == status


def test_to_instance(driver):
    node = Node(
        "123", "vm-1", NodeState.RUNNING, ["1.2.3.4"], ["10.0.0.1", None], driver,
        image=NodeImage("UBUNTU_12_64", "Ubuntu", driver),
        extra={"datacenter": "dal01"},
    )

    instance = mappers.to_instance(node, group="jclouds")

    assert instance.id == "123"
    assert instance.name == "vm-1"
    assert instance.status == InstanceStatus.RUNNING
    assert instance.operating_system.family == OsFamily.UBUNTU
    assert instance.public_ips == ["1.2.3.4"]
    assert instance.private_ips == ["10.0.0.1"]
    assert instance.location_id == "dal01"
    assert instance.group == "jclouds"


def test_to_instance_reads_os_from_extra(driver):
    node = Node("5", "vm-5", NodeState.PENDING, [], [], driver, extra={"os": "Debian 11"})

    instance = mappers.to_instance(node)

    assert instance.operating_system.family == OsFamily.DEBIAN
    assert instance.status == InstanceStatus.PENDING
    assert instance.group is None


def test_to_instance_reads_availability_zone(driver):
    node = Node("i-0abc", "vm-6", NodeState.RUNNING, [], [], driver,
                extra={"availability": "us-east-1a"})

    assert mappers.to_instance(node).location_id == "us-east-1a"
