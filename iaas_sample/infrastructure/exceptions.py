from typing import Any, Optional


class InfrastructureError(Exception):
    """Base exception for infrastructure-related errors."""
    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.details = details


class ProviderConnectionError(InfrastructureError):
    """Raised when the compute-service connection cannot be established."""
    pass


class ProviderError(InfrastructureError):
    """Raised when a compute-service call fails."""
    def __init__(self, operation: str, message: str, details: Optional[Any] = None):
        super().__init__(f"Provider {operation} failed: {message}", details)
        self.operation = operation


class ProviderTimeoutError(ProviderError):
    """Raised when a compute-service call exceeds its timeout."""
    pass


class ProviderAuthenticationError(ProviderError):
    """Raised when the provider rejects the credentials."""
    pass


class TemplateResolutionError(ProviderError):
    """Raised when a template cannot be matched to provider resources."""
    pass
