"""
LinkGuard Custom Exceptions

Centralized exception classes for error handling.
"""

from typing import Optional


class LinkGuardError(Exception):
    """Base exception for all LinkGuard errors."""
    def __init__(self, message: str = "An error occurred"):
        self.message = message
        super().__init__(self.message)


# ============================================================================
# Validation Exceptions
# ============================================================================

class ValidationError(LinkGuardError):
    """Input validation failed."""
    pass


class InvalidURLError(ValidationError):
    """URL format is invalid."""
    pass


# ============================================================================
# Provider Exceptions
# ============================================================================

class ProviderError(LinkGuardError):
    """Error talking to a threat intelligence provider."""
    def __init__(self, provider: str, message: str = "Provider error"):
        self.provider = provider
        super().__init__(f"{provider}: {message}")


class ProviderHTTPError(ProviderError):
    """Provider answered with a non-success HTTP status."""
    def __init__(self, provider: str, status: int, detail: Optional[str] = None):
        self.status = status
        message = f"HTTP {status}"
        if detail:
            message = f"{message} - {detail}"
        super().__init__(provider, message)


class ProviderResponseError(ProviderError):
    """Provider response did not have the expected shape."""
    pass


# ============================================================================
# Content Exceptions
# ============================================================================

class ContentFetchError(LinkGuardError):
    """Page could not be fetched in a form that can be analyzed."""
    pass


# ============================================================================
# Configuration Exceptions
# ============================================================================

class ConfigurationError(LinkGuardError):
    """Configuration error."""
    pass
