"""Custom application exceptions."""

from datetime import date
from enum import Enum

from fastapi import HTTPException, status


class AppException(HTTPException):
    """Base application exception."""

    def __init__(
        self,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail: str = "An unexpected error occurred",
        headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(status_code=status_code, detail=detail, headers=headers)


class ValidationError(AppException):
    """Rejected caller input (non-positive money or nights, inverted ranges)."""

    def __init__(self, detail: str = "Validation failed") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class ConfigurationError(AppException):
    """Broken fee configuration. Quote generation must halt."""

    def __init__(self, detail: str = "Invalid fee configuration") -> None:
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)


class NotFoundError(AppException):
    """Resource not found exception."""

    def __init__(self, resource: str = "Resource", identifier: str | None = None) -> None:
        detail = f"{resource} not found"
        if identifier:
            detail = f"{resource} with ID '{identifier}' not found"
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class InvalidBookingStatus(AppException):
    """Invalid booking status for operation."""

    def __init__(self, detail: str = "This operation is not allowed for the current booking status") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class ConflictReason(str, Enum):
    """Why a date range could not be reserved."""

    BOOKED = "booked"
    BLOCKED = "blocked"
    EXTERNAL = "external"
    CONFLICT = "conflict"


CONFLICT_MESSAGES: dict[ConflictReason, str] = {
    ConflictReason.BOOKED: "These dates are already booked by another guest",
    ConflictReason.BLOCKED: "These dates have been blocked by the host",
    ConflictReason.EXTERNAL: "These dates are booked on another channel",
    ConflictReason.CONFLICT: "These dates have conflicting bookings that need manual review",
}


class ConflictError(AppException):
    """Target range is not entirely free at reservation time."""

    def __init__(self, reason: ConflictReason, day: date | None = None) -> None:
        self.reason = reason
        self.day = day
        detail = CONFLICT_MESSAGES[reason]
        if day is not None:
            detail = f"{detail} (first unavailable night: {day.isoformat()})"
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class UpstreamFetchError(AppException):
    """External calendar feed unreachable or unusable."""

    def __init__(self, url: str, detail: str | None = None, upstream_status: int | None = None) -> None:
        self.url = url
        self.upstream_status = upstream_status
        message = "Unable to fetch iCal feed"
        if detail:
            message = f"{message}: {detail}"
        status_code = status.HTTP_502_BAD_GATEWAY
        if upstream_status is not None and upstream_status >= 400:
            status_code = upstream_status
        super().__init__(status_code=status_code, detail=message)
