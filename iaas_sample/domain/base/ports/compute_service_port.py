"""Domain port for the compute-service collaborator."""

from abc import ABC, abstractmethod
from typing import List

from iaas_sample.domain.compute import (
    HardwareProfile,
    Image,
    InstanceDescriptor,
    Location,
    Template,
)


class ComputeServicePort(ABC):
    """Domain port for compute provider operations."""

    @abstractmethod
    def list_assignable_locations(self) -> List[Location]:
        """List locations instances can be placed in."""

    @abstractmethod
    def list_hardware_profiles(self) -> List[HardwareProfile]:
        """List available hardware profiles."""

    @abstractmethod
    def list_images(self) -> List[Image]:
        """List available images."""

    @abstractmethod
    def list_nodes(self) -> List[InstanceDescriptor]:
        """List instances currently known to the provider."""

    @abstractmethod
    def create_nodes_in_group(
        self, group: str, count: int, template: Template
    ) -> List[InstanceDescriptor]:
        """Create ``count`` nodes tagged with ``group`` from ``template``."""

    @abstractmethod
    def destroy_node(self, instance_id: str) -> None:
        """Destroy the node with the given ID.

        Raises:
            InstanceNotFoundError: If the provider has no such node
        """
