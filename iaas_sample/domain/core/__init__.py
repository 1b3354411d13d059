"""Core domain primitives shared across the package."""

from .exceptions import (
    ConfigurationError,
    DomainException,
    HostnameConflictError,
    InstanceNotFoundError,
)

__all__ = [
    "ConfigurationError",
    "DomainException",
    "HostnameConflictError",
    "InstanceNotFoundError",
]
