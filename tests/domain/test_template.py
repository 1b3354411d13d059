from iaas_sample.domain.compute import OsFamily, PAYLOAD_KEY, ProvisionRequest, Template


def _request(**overrides):
    data = {
        "image_id": "UBUNTU_12_64",
        "location_id": "dal01",
        "hardware_id": "cpu=1,memory=4096,disk=25,type=SAN",
        "os_family": OsFamily.UBUNTU,
        "os_version": "12.04",
        "domain_name": "service.com",
        "host_name": "vm-1",
        "metadata_payload": "A=1234,B=1234,C=1234",
    }
    data.update(overrides)
    return ProvisionRequest(**data)


def test_template_from_request_maps_every_field():
    template = Template.from_request(_request())

    assert template.image_id == "UBUNTU_12_64"
    assert template.location_id == "dal01"
    assert template.hardware_id == "cpu=1,memory=4096,disk=25,type=SAN"
    assert template.os_family == OsFamily.UBUNTU
    assert template.os_version_pattern == "12.04"
    assert template.options.domain_name == "service.com"
    assert template.options.node_names == ["vm-1"]
    assert template.options.inbound_ports == (22, 80)
    assert template.options.user_metadata == {PAYLOAD_KEY: "A=1234,B=1234,C=1234"}


def test_template_from_request_with_custom_ports():
    template = Template.from_request(_request(), inbound_ports=[8080])
    assert template.options.inbound_ports == (8080,)


def test_template_from_request_without_payload():
    template = Template.from_request(_request(metadata_payload=None))
    assert template.options.user_metadata == {}


def test_payload_key():
    assert PAYLOAD_KEY == "PAYLOAD"
