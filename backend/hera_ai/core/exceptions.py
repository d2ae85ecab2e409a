"""
Custom Exception Hierarchy for the HERA AI Router

Provides domain-specific exceptions with structured error codes, logging,
and user-friendly messages for better debugging and error handling.
"""

import logging
from typing import Optional, Dict, Any
from datetime import datetime, timezone

logger = logging.getLogger(__name__)


class HeraAIException(Exception):
    """
    Base exception for all HERA AI errors.

    Attributes:
        error_code: Unique error identifier for logging/debugging
        message: User-friendly error message
        details: Technical details for logging (not exposed to users)
        status_code: HTTP status code (default: 500)
    """

    def __init__(
        self,
        message: str,
        error_code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code
        self.timestamp = datetime.now(timezone.utc).isoformat()

        # Log the error with full context
        logger.error(
            f"[{error_code}] {message}",
            extra={
                "error_code": error_code,
                "details": details,
                "status_code": status_code,
                "timestamp": self.timestamp
            }
        )

        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.error_code,
            "message": self.message,
            "timestamp": self.timestamp
        }


# ============================================================================
# Provider Errors
# ============================================================================

class ProviderError(HeraAIException):
    """A provider adapter call failed (network, malformed response, backend error)."""

    def __init__(
        self,
        message: str = "AI provider request failed",
        provider: Optional[str] = None,
        error_code: str = "PROVIDER_ERROR",
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 502  # Bad Gateway
    ):
        if details is None:
            details = {}
        if provider:
            details["provider"] = provider
        self.provider = provider

        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
            status_code=status_code
        )


class ProviderTimeoutError(ProviderError):
    """A provider call exceeded its deadline."""

    def __init__(
        self,
        provider: str,
        timeout_seconds: float,
        details: Optional[Dict[str, Any]] = None
    ):
        if details is None:
            details = {}
        details["timeout_seconds"] = timeout_seconds

        super().__init__(
            message=f"{provider} request timed out after {timeout_seconds}s",
            provider=provider,
            error_code="PROVIDER_TIMEOUT",
            details=details,
            status_code=504  # Gateway Timeout
        )


# ============================================================================
# Resource Not Found Errors
# ============================================================================

class ResourceNotFoundError(HeraAIException):
    """Requested resource not found errors."""

    def __init__(
        self,
        message: str = "Resource not found",
        error_code: str = "RESOURCE_NOT_FOUND",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
            status_code=404
        )


class ProviderNotFoundError(ResourceNotFoundError):
    """Provider id is not registered."""

    def __init__(
        self,
        provider_id: str,
        details: Optional[Dict[str, Any]] = None
    ):
        if details is None:
            details = {}
        details["provider_id"] = provider_id

        super().__init__(
            message=f"AI provider '{provider_id}' is not registered",
            error_code="PROVIDER_NOT_FOUND",
            details=details
        )


# ============================================================================
# Cache Errors
# ============================================================================

class CacheError(HeraAIException):
    """Response cache read/write errors."""

    def __init__(
        self,
        message: str = "Response cache operation failed",
        error_code: str = "CACHE_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
            status_code=500
        )


# ============================================================================
# Configuration Errors
# ============================================================================

class ConfigurationError(HeraAIException):
    """Configuration errors."""

    def __init__(
        self,
        message: str = "Configuration error",
        error_code: str = "CONFIGURATION_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
            status_code=500
        )


class MissingAPIKeyError(ConfigurationError):
    """Missing API key configuration errors."""

    def __init__(
        self,
        service_name: str,
        details: Optional[Dict[str, Any]] = None
    ):
        if details is None:
            details = {}
        details["service_name"] = service_name

        super().__init__(
            message=f"{service_name} API key not configured",
            error_code="MISSING_API_KEY",
            details=details
        )
        self.status_code = 501  # Not Implemented
