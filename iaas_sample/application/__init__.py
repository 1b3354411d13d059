"""Application layer: the provisioning facade."""

from .provisioning_client import ProvisioningClient, name_matches

__all__ = ["ProvisioningClient", "name_matches"]
