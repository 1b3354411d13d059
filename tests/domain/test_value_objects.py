import pytest
from pydantic import ValidationError

from iaas_sample.domain.compute import (
    Credentials,
    InstanceDescriptor,
    InstanceStatus,
    OperatingSystem,
    OsFamily,
    ProvisionRequest,
)


@pytest.mark.parametrize("text,family,version,is_64bit", [
    ("UBUNTU_12_64", OsFamily.UBUNTU, "12", True),
    ("Ubuntu Linux 12.04 LTS Precise Pangolin - Minimal Install (64 bit)", OsFamily.UBUNTU, "12.04", True),
    ("CentOS 6.0 - Minimal Install (32 bit)", OsFamily.CENTOS, "6.0", False),
    ("Red Hat Enterprise Linux 7", OsFamily.RHEL, "7", False),
    ("Windows Server 2012 R2 Standard", OsFamily.WINDOWS, "2012", False),
    ("debian-11-bullseye-amd64", OsFamily.DEBIAN, "11", True),
    ("custom appliance", OsFamily.UNRECOGNIZED, None, False),
])
def test_operating_system_from_description(text, family, version, is_64bit):
    os_desc = OperatingSystem.from_description(text)

    assert os_desc.family == family
    assert os_desc.version == version
    assert os_desc.is_64bit is is_64bit
    assert os_desc.description == text


def test_operating_system_from_empty_description():
    assert OperatingSystem.from_description(None) == OperatingSystem()


def test_operating_system_str():
    assert str(OperatingSystem.from_description("UBUNTU_12_64")) == "ubuntu 12 64bit"
    assert str(OperatingSystem()) == "unrecognized"


def test_os_family_parse_accepts_any_case():
    assert OsFamily.parse("UBUNTU") == OsFamily.UBUNTU
    assert OsFamily.parse(" centos ") == OsFamily.CENTOS


def test_os_family_parse_rejects_unknown():
    with pytest.raises(ValueError) as exc:
        OsFamily.parse("plan9")
    assert "UBUNTU" in str(exc.value)


def test_credentials_are_immutable_and_hide_secret():
    credentials = Credentials(identity="user", secret="s3cret")

    assert "s3cret" not in repr(credentials)
    with pytest.raises(ValidationError):
        credentials.identity = "other"


def test_instance_descriptor_describe():
    instance = InstanceDescriptor(
        id="42",
        name="vm-1",
        operating_system=OperatingSystem.from_description("CentOS 7 64 bit"),
        status=InstanceStatus.RUNNING,
    )
    assert instance.describe() == "42 vm-1 centos 7 64bit running"


def test_provision_request_parses_os_family():
    request = ProvisionRequest(
        image_id="UBUNTU_12_64", location_id="dal01", hardware_id="hw",
        os_family="Ubuntu", host_name="vm-1",
    )
    assert request.os_family == OsFamily.UBUNTU
    assert request.metadata_payload is None


@pytest.mark.parametrize("field", ["host_name", "image_id", "location_id", "hardware_id"])
def test_provision_request_rejects_blank_identifiers(field):
    data = {
        "image_id": "img", "location_id": "loc", "hardware_id": "hw",
        "os_family": "ubuntu", "host_name": "vm-1",
    }
    data[field] = "  "
    with pytest.raises(ValidationError):
        ProvisionRequest(**data)


@pytest.mark.parametrize("host_name", [" vm-a", "vm-a ", "vm-a\n"])
def test_provision_request_rejects_surrounding_whitespace(host_name):
    with pytest.raises(ValidationError):
        ProvisionRequest(image_id="img", location_id="loc", hardware_id="hw",
                         os_family="ubuntu", host_name=host_name)


def test_provision_request_keeps_host_name_exactly():
    request = ProvisionRequest(image_id="img", location_id="loc", hardware_id="hw",
                               os_family="ubuntu", host_name="vm-a")
    assert request.host_name == "vm-a"


def test_provision_request_rejects_unknown_os_family():
    with pytest.raises(ValidationError):
        ProvisionRequest(image_id="i", location_id="l", hardware_id="h",
                         os_family="beos", host_name="vm-1")
