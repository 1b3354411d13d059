"""Sample IaaS provisioning client built on libcloud."""

__version__ = "1.0.0"
