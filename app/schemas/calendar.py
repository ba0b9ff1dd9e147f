"""Calendar and availability Pydantic schemas."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.domain.availability import EXTERNAL_CHANNELS, Channel, EventKind, EventStatus


class CalendarEventResponse(BaseModel):
    """Schema for a calendar event (end_date exclusive)."""

    model_config = ConfigDict(from_attributes=True)

    uid: str | None
    listing_id: str
    start_date: date
    end_date: date
    channel: Channel
    kind: EventKind
    status: EventStatus | None
    summary: str | None
    nights: int


class AvailabilityResponse(BaseModel):
    """Schema for booked and blocked nights in a window."""

    model_config = ConfigDict(populate_by_name=True)

    listing_id: str
    from_date: date = Field(..., serialization_alias="from")
    to_date: date = Field(..., serialization_alias="to")
    booked: list[date]
    blocked: list[date]
    generated_at: datetime


class BlockCreate(BaseModel):
    """Schema for a host blocking nights on a listing."""

    start_date: date
    end_date: date
    summary: str | None = Field(None, max_length=200)

    @field_validator("end_date")
    @classmethod
    def validate_end(cls, v: date, info) -> date:
        start = info.data.get("start_date")
        if start and v <= start:
            raise ValueError("end_date must be after start_date")
        return v


class CalendarImportRequest(BaseModel):
    """Schema for importing an external iCal feed."""

    url: str = Field(..., min_length=1, max_length=2000, pattern=r"^(https?|webcal)://")
    listing_id: str | None = Field(None, max_length=64)
    channel: Channel | None = None

    @field_validator("url")
    @classmethod
    def normalize_webcal(cls, v: str) -> str:
        if v.startswith("webcal://"):
            return "https://" + v[len("webcal://"):]
        return v

    @field_validator("channel")
    @classmethod
    def validate_channel(cls, v: Channel | None) -> Channel | None:
        if v is not None and v not in EXTERNAL_CHANNELS:
            raise ValueError("channel must be an external booking channel")
        return v


class ImportedEvent(BaseModel):
    """Schema for one parsed feed event (end inclusive)."""

    model_config = ConfigDict(from_attributes=True)

    uid: str | None
    start: datetime
    end: datetime
    summary: str | None
    url: str | None
    nights: int


class CalendarImportResponse(BaseModel):
    """Schema for a feed import result."""

    events: list[ImportedEvent]
    skipped: int = 0
    stored: int | None = None
