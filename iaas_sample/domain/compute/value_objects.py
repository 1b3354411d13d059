"""Compute value objects returned by the provider.

Every object here is a read-only snapshot: the provider owns the real
resource and each listing call fetches a fresh copy.
"""
import re
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class OsFamily(str, Enum):
    """Operating system family enumeration."""
    UBUNTU = "ubuntu"
    DEBIAN = "debian"
    CENTOS = "centos"
    RHEL = "rhel"
    FEDORA = "fedora"
    SUSE = "suse"
    WINDOWS = "windows"
    FREEBSD = "freebsd"
    COREOS = "coreos"
    UNRECOGNIZED = "unrecognized"

    @classmethod
    def from_description(cls, text: Optional[str]) -> "OsFamily":
        """Infer the family from an image name or description."""
        if not text:
            return cls.UNRECOGNIZED
        lowered = text.lower()
        for family, keywords in _FAMILY_KEYWORDS:
            if any(keyword in lowered for keyword in keywords):
                return family
        return cls.UNRECOGNIZED

    @classmethod
    def parse(cls, value: str) -> "OsFamily":
        """Parse a user supplied family name (case-insensitive)."""
        try:
            return cls(value.strip().lower())
        except ValueError:
            valid = ", ".join(f.name for f in cls if f is not cls.UNRECOGNIZED)
            raise ValueError(f"Unknown OS family '{value}'. Valid families: {valid}")


# Order matters: "red hat" must be checked before generic substrings.
_FAMILY_KEYWORDS = (
    (OsFamily.UBUNTU, ("ubuntu",)),
    (OsFamily.DEBIAN, ("debian",)),
    (OsFamily.CENTOS, ("centos",)),
    (OsFamily.RHEL, ("redhat", "red hat", "rhel")),
    (OsFamily.FEDORA, ("fedora",)),
    (OsFamily.SUSE, ("suse",)),
    (OsFamily.WINDOWS, ("windows", "win2")),
    (OsFamily.FREEBSD, ("freebsd",)),
    (OsFamily.COREOS, ("coreos",)),
)

_VERSION_PATTERN = re.compile(r"(\d+(?:\.\d+)*)")
_64BIT_PATTERN = re.compile(r"64[ -]?bit|_64\b|x86_64|amd64", re.IGNORECASE)


class InstanceStatus(str, Enum):
    """Instance status as observed through the provider."""
    PENDING = "pending"
    RUNNING = "running"
    SUSPENDED = "suspended"
    TERMINATED = "terminated"
    ERROR = "error"
    UNRECOGNIZED = "unrecognized"


class Credentials(BaseModel):
    """Provider identity and secret, set once at client construction."""
    model_config = ConfigDict(frozen=True)

    identity: str
    secret: str = Field(repr=False)


class OperatingSystem(BaseModel):
    """Operating system descriptor of an image or instance."""
    model_config = ConfigDict(frozen=True)

    family: OsFamily = OsFamily.UNRECOGNIZED
    version: Optional[str] = None
    description: Optional[str] = None
    is_64bit: bool = False

    @classmethod
    def from_description(cls, text: Optional[str]) -> "OperatingSystem":
        """Build a descriptor by inspecting free-form image text."""
        if not text:
            return cls()
        # Drop the bitness marker so "UBUNTU_12_64" yields version 12, not 64.
        stripped = _64BIT_PATTERN.sub(" ", text)
        version_match = _VERSION_PATTERN.search(stripped)
        return cls(
            family=OsFamily.from_description(text),
            version=version_match.group(1) if version_match else None,
            description=text,
            is_64bit=bool(_64BIT_PATTERN.search(text)),
        )

    def __str__(self) -> str:
        parts = [self.family.value]
        if self.version:
            parts.append(self.version)
        if self.is_64bit:
            parts.append("64bit")
        return " ".join(parts)


class Location(BaseModel):
    """Data-center region where instances can be placed."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: Optional[str] = None
    country: Optional[str] = None
    provider: Optional[str] = None


class HardwareProfile(BaseModel):
    """Resource descriptor for an instance size."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: Optional[str] = None
    cpus: Optional[int] = None
    memory_mb: Optional[int] = None
    disk_gb: Optional[int] = None
    storage_type: Optional[str] = None
    price: Optional[float] = None


class Image(BaseModel):
    """Bootable image offered by the provider."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: Optional[str] = None
    operating_system: OperatingSystem = Field(default_factory=OperatingSystem)


class InstanceDescriptor(BaseModel):
    """A provisioned (or provisioning) virtual machine."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: Optional[str] = None
    operating_system: OperatingSystem = Field(default_factory=OperatingSystem)
    status: InstanceStatus = InstanceStatus.UNRECOGNIZED
    public_ips: List[str] = Field(default_factory=list)
    private_ips: List[str] = Field(default_factory=list)
    location_id: Optional[str] = None
    group: Optional[str] = None

    def describe(self) -> str:
        """One-line summary: id, name, operating system and status."""
        return f"{self.id} {self.name} {self.operating_system} {self.status.value}"
