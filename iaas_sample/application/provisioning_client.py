"""
Provisioning facade.

Binds one set of provider credentials to one compute-service connection and
exposes the listing, creation and termination operations. Failures are logged
here and re-raised as typed errors so callers can tell an empty result from a
failed call.
"""
from typing import Any, Callable, List, Mapping, Optional, Sequence, TypeVar

from iaas_sample.domain.base.ports import ComputeServicePort
from iaas_sample.domain.compute import (
    DEFAULT_INBOUND_PORTS,
    Credentials,
    HardwareProfile,
    Image,
    InstanceDescriptor,
    Location,
    ProvisionRequest,
    Template,
)
from iaas_sample.domain.core.exceptions import HostnameConflictError, InstanceNotFoundError
from iaas_sample.infrastructure.compute.libcloud_compute_service import (
    DEFAULT_PROVIDER,
    DEFAULT_TIMEOUT_SECONDS,
    LibcloudComputeService,
)
from iaas_sample.infrastructure.exceptions import ProviderError
from iaas_sample.infrastructure.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

DEFAULT_GROUP = "jclouds"


def name_matches(name: str) -> Callable[[InstanceDescriptor], bool]:
    """Predicate selecting instances whose name equals ``name`` exactly."""

    def _matches(instance: InstanceDescriptor) -> bool:
        return instance.name == name

    return _matches


class ProvisioningClient:
    """Facade over a compute service for one provider account."""

    def __init__(
        self,
        identity: str,
        secret: str,
        provider: str = DEFAULT_PROVIDER,
        compute_service: Optional[ComputeServicePort] = None,
        timeout: int = DEFAULT_TIMEOUT_SECONDS,
        overrides: Optional[Mapping[str, Any]] = None,
        group: str = DEFAULT_GROUP,
        inbound_ports: Sequence[int] = DEFAULT_INBOUND_PORTS,
    ):
        """
        Initialize the client and connect to the compute service.

        Args:
            identity: Provider identity (user name)
            secret: Provider secret (API key)
            provider: libcloud compute provider name
            compute_service: Pre-built compute service; skips connecting
            timeout: Per-request timeout in seconds
            overrides: Extra driver constructor arguments
            group: Group label attached to created instances
            inbound_ports: Ports opened on created instances

        Raises:
            ProviderConnectionError: If the compute service cannot be initialized
        """
        self.credentials = Credentials(identity=identity, secret=secret)
        self.provider = provider
        self.group = group
        self.inbound_ports = tuple(inbound_ports)

        if compute_service is None:
            compute_service = LibcloudComputeService.connect(
                self.credentials,
                provider=provider,
                timeout=timeout,
                overrides=overrides,
            )
        self._compute = compute_service

    def _call(self, description: str, func: Callable[[], T]) -> T:
        try:
            return func()
        except ProviderError as e:
            logger.error(f"Could not {description}", error=str(e))
            raise

    def list_locations(self) -> List[Location]:
        logger.info("Listing locations...")
        return self._call("list locations", self._compute.list_assignable_locations)

    def list_hardware_profiles(self) -> List[HardwareProfile]:
        logger.info("Listing hardware...")
        return self._call("list hardware", self._compute.list_hardware_profiles)

    def list_images(self) -> List[Image]:
        logger.info("Listing images...")
        return self._call("list images", self._compute.list_images)

    def list_instances(self) -> List[InstanceDescriptor]:
        logger.info("Listing instances...")
        return self._call("list instances", self._compute.list_nodes)

    def create_instance(self, request: ProvisionRequest) -> InstanceDescriptor:
        """
        Create one instance named ``request.host_name``.

        The hostname check and the create call are not atomic; a concurrent
        creator can still produce a duplicate name.

        Raises:
            HostnameConflictError: If an instance with the hostname exists
            ProviderError: If the provider call fails
        """
        logger.info("Creating new instance", name=request.host_name)

        logger.info("Checking hostname availability...")
        matches = name_matches(request.host_name)
        existing = next((i for i in self.list_instances() if matches(i)), None)
        if existing is not None:
            logger.error("Hostname already in use", name=request.host_name,
                         instance_id=existing.id)
            raise HostnameConflictError(request.host_name, instance_id=existing.id)

        template = Template.from_request(request, inbound_ports=self.inbound_ports)
        nodes = self._call(
            "create instance",
            lambda: self._compute.create_nodes_in_group(self.group, 1, template),
        )
        if not nodes:
            error = ProviderError("create_nodes_in_group", "provider returned no instances")
            logger.error("Could not create instance", error=str(error))
            raise error

        instance = nodes[0]
        logger.info("Instance created", instance_id=instance.id, name=instance.name)
        return instance

    def terminate_instance_by_name(self, name: str) -> int:
        """
        Destroy every instance named ``name``.

        Returns:
            Number of instances destroyed (0 if none matched)
        """
        logger.info("Terminating instances", name=name)

        matches = name_matches(name)
        destroyed = 0
        for instance in self.list_instances():
            if not matches(instance):
                continue
            logger.info("Terminating instance", instance_id=instance.id, name=instance.name)
            self._call("terminate instance", lambda: self._compute.destroy_node(instance.id))
            logger.info("Instance terminated", instance_id=instance.id, name=instance.name)
            destroyed += 1

        if destroyed:
            logger.info("Termination successfully completed", count=destroyed)
        else:
            logger.warning("No active instances found to terminate", name=name)
        return destroyed

    def terminate_instance_by_id(self, instance_id: str) -> None:
        """
        Destroy the instance with the given ID without checking it exists.

        Raises:
            InstanceNotFoundError: If the provider has no such instance
            ProviderError: If the provider call fails
        """
        logger.info("Terminating instance", instance_id=instance_id)
        try:
            self._call("terminate instance", lambda: self._compute.destroy_node(instance_id))
        except InstanceNotFoundError:
            logger.warning("Instance not found", instance_id=instance_id)
            raise
        logger.info("Instance terminated", instance_id=instance_id)
