"""Core utilities: exceptions and HTTP middleware."""

from app.core.exceptions import (
    AppException,
    ConfigurationError,
    ConflictError,
    ConflictReason,
    InvalidBookingStatus,
    NotFoundError,
    UpstreamFetchError,
    ValidationError,
)

__all__ = [
    "AppException",
    "ConfigurationError",
    "ConflictError",
    "ConflictReason",
    "InvalidBookingStatus",
    "NotFoundError",
    "UpstreamFetchError",
    "ValidationError",
]
