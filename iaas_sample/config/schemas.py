"""Application configuration schema."""
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator


class LogLevel(str, Enum):
    """Log level enumeration."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogDestination(str, Enum):
    """Log destination enumeration."""
    FILE = "file"
    CONSOLE = "console"
    BOTH = "both"


class LogFileConfig(BaseModel):
    """Rotating log file settings."""

    path: str = Field("logs/iaas-sample.log", description="Log file path")
    max_size_mb: int = Field(10, description="Maximum size before rotation")
    backup_count: int = Field(5, description="Number of rotated files kept")

    @field_validator("max_size_mb", "backup_count")
    @classmethod
    def validate_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("must not be negative")
        return v


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = LogLevel.INFO
    destination: LogDestination = LogDestination.CONSOLE
    file: LogFileConfig = Field(default_factory=LogFileConfig)

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: Any) -> Any:
        """Accept lower-case level names."""
        return v.upper() if isinstance(v, str) else v


class ProviderConfig(BaseModel):
    """Compute provider connection settings."""

    name: str = Field("ec2", description="libcloud compute driver name")
    identity: Optional[str] = Field(None, description="Provider identity / user name")
    secret: Optional[str] = Field(None, description="Provider API key", repr=False)
    timeout: int = Field(60, description="Per-request timeout in seconds")
    group: str = Field("jclouds", description="Group label attached to created instances")
    inbound_ports: List[int] = Field(default_factory=lambda: [22, 80])
    overrides: Dict[str, Any] = Field(
        default_factory=dict,
        description="Extra keyword arguments passed to the driver constructor",
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Provider name must not be empty")
        return v.strip().lower()

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: int) -> int:
        """Validate timeout."""
        if v <= 0:
            raise ValueError("Timeout must be positive")
        return v

    @field_validator("inbound_ports")
    @classmethod
    def validate_ports(cls, v: List[int]) -> List[int]:
        for port in v:
            if not 0 < port < 65536:
                raise ValueError(f"Invalid port {port}")
        return v


class DefaultsConfig(BaseModel):
    """Values used by the create command when flags are omitted."""

    image_id: str = "ami-0c7217cdde317cfec"
    location_id: str = "us-east-1a"
    hardware_id: str = "t2.micro"
    os_family: str = "ubuntu"
    os_version: Optional[str] = "22.04"
    domain_name: Optional[str] = None
    metadata_payload: Optional[str] = None


class AppConfig(BaseModel):
    """Application configuration."""

    version: str = Field("1.0.0", description="Configuration version")
    provider: ProviderConfig = Field(default_factory=ProviderConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
