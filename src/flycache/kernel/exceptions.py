"""Unified exception hierarchy for FlyCache.

All library exceptions inherit from FlyCacheException, enabling unified
error handling across modules.

Categories:
- BusinessException: Invalid configuration and input errors
- InfrastructureException: Cache backend, network and transport failures
"""

from __future__ import annotations


# =============================================================================
# Base Exception
# =============================================================================


class FlyCacheException(Exception):
    """Base exception for all FlyCache errors.

    Carries an optional error code and context dict for structured error data.
    Catch FlyCacheException to handle every library error, or catch specific
    subclasses for targeted handling.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "CACHE_BACKEND_UNAVAILABLE").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


# =============================================================================
# Business Exceptions
# =============================================================================


class BusinessException(FlyCacheException):
    """Caller-side errors: bad input or bad configuration."""


class ValidationException(BusinessException):
    """Input or configuration validation failures."""


# =============================================================================
# Infrastructure Exceptions
# =============================================================================


class InfrastructureException(FlyCacheException):
    """Infrastructure failures: cache backends, network, transport."""


class CacheBackendException(InfrastructureException):
    """The cache backend rejected or failed an operation."""


class BackendUnavailableException(CacheBackendException):
    """The cache backend could not be reached (connection or transport failure)."""


class EntryNotFoundException(CacheBackendException):
    """No document exists at the requested storage location."""


class EmptyPayloadException(CacheBackendException):
    """A document exists but carries no usable payload."""


class AcknowledgmentMissingException(CacheBackendException):
    """The backend accepted a write at transport level but did not confirm it."""
