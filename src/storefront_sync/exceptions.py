"""Exception hierarchy for Storefront Sync.

All exceptions inherit from StorefrontSyncError so callers can catch
service-level errors with a single except clause.
"""

from __future__ import annotations

from typing import Any


class StorefrontSyncError(Exception):
    """Base exception for all Storefront Sync errors."""

    def __init__(self, message: str = "", *, details: dict[str, Any] | None = None) -> None:
        self.details = details or {}
        super().__init__(message)


# =============================================================================
# Input / configuration errors
# =============================================================================


class ConfigValidationError(StorefrontSyncError):
    """Raised when a provider is enabled with required fields missing."""

    def __init__(
        self,
        message: str = "",
        *,
        missing_fields: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.missing_fields = missing_fields or []
        merged = {"missingFields": self.missing_fields, **(details or {})}
        super().__init__(message, details=merged)


class RequestValidationFailed(StorefrontSyncError):
    """Raised when an admin request has a malformed shape."""


class NotFoundError(StorefrontSyncError):
    """Raised when a provider config, product, supplier or integration is missing."""


class AuthenticationError(StorefrontSyncError):
    """Raised when the admin key or cron secret does not match."""


# =============================================================================
# Sync errors
# =============================================================================


class AdapterError(StorefrontSyncError):
    """Raised when an external provider call fails or the adapter is unusable."""


class SyncBatchError(StorefrontSyncError):
    """Raised when the due-integration batch cannot be read at all."""
