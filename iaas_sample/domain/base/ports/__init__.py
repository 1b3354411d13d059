"""Domain ports."""

from .compute_service_port import ComputeServicePort

__all__ = ["ComputeServicePort"]
