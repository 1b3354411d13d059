# iaas_sample/domain/core/exceptions.py
from typing import Any, List, Optional


class DomainException(Exception):
    """Base exception for all domain-specific errors."""
    pass


class HostnameConflictError(DomainException):
    """Raised when an instance with the requested hostname already exists."""
    def __init__(self, host_name: str, instance_id: Optional[str] = None):
        super().__init__(f"An instance with hostname {host_name} already exists")
        self.host_name = host_name
        self.instance_id = instance_id


class InstanceNotFoundError(DomainException):
    """Raised when the provider has no instance with the given ID."""
    def __init__(self, instance_id: str, details: Any = None):
        super().__init__(f"Instance with ID {instance_id} not found")
        self.instance_id = instance_id
        self.details = details


class ConfigurationError(DomainException):
    """Raised when there's an issue with configuration."""
    def __init__(self, message: str, missing_fields: Optional[List[str]] = None):
        super().__init__(message)
        self.missing_fields = missing_fields or []
