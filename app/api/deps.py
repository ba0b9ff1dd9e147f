"""API dependencies wiring services to the application's repository."""

from typing import Annotated

from fastapi import Depends, Request

from app.repositories.base import CalendarRepository
from app.services.booking_service import BookingService
from app.services.calendar_import_service import CalendarImportService
from app.services.commission_service import CommissionService, commission_service


def get_commission_service() -> CommissionService:
    return commission_service


def get_calendar_repository(request: Request) -> CalendarRepository:
    """Repository chosen when the application was created."""
    return request.app.state.calendar_repository


def get_calendar_import_service(request: Request) -> CalendarImportService:
    return request.app.state.calendar_import_service


def get_booking_service(
    repository: Annotated[CalendarRepository, Depends(get_calendar_repository)],
    commissions: Annotated[CommissionService, Depends(get_commission_service)],
) -> BookingService:
    return BookingService(repository, commissions)
