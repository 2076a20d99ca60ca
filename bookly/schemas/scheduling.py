# bookly/schemas/scheduling.py
"""
Pydantic schemas for the scheduling API
"""
from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional, List
from datetime import date as date_type, datetime
from uuid import UUID

from bookly.core.constants import AppointmentSource, AppointmentStatus, CapacityType
from bookly.utils.time_utils import to_utc

END_OF_DAY = "24:00"


def _validate_hhmm(v: str, allow_end_of_day: bool = False) -> str:
    if allow_end_of_day and v == END_OF_DAY:
        return v
    try:
        datetime.strptime(v, "%H:%M")
    except ValueError:
        raise ValueError("Time must be in HH:MM format")
    # Stored zero padded so string order matches time order
    hours, minutes = v.split(":")
    return f"{int(hours):02d}:{int(minutes):02d}"


# ============================================================================
# Availability
# ============================================================================

class AvailabilityBlockCreate(BaseModel):
    """A weekly template row (day_of_week) or a date override (date), never both"""
    day_of_week: Optional[int] = Field(None, ge=0, le=6, description="0=Sunday, 6=Saturday")
    date: Optional[date_type] = Field(None, description="Exact date for an override")
    is_override: bool = Field(False)
    start_time: str = Field(..., description="Start time (HH:MM)")
    end_time: str = Field(..., description="End time (HH:MM, 24:00 for end of day)")
    is_available: bool = Field(True, description="Overrides only: False marks a day off")
    reason: Optional[str] = None

    @field_validator("start_time")
    @classmethod
    def validate_start_time(cls, v: str) -> str:
        return _validate_hhmm(v)

    @field_validator("end_time")
    @classmethod
    def validate_end_time(cls, v: str) -> str:
        return _validate_hhmm(v, allow_end_of_day=True)

    @model_validator(mode="after")
    def validate_block(self):
        if self.end_time <= self.start_time:
            raise ValueError("endTime must be greater than startTime")
        if self.is_override:
            if self.date is None:
                raise ValueError("Overrides require an exact date.")
            if self.day_of_week is not None:
                raise ValueError("Overrides must omit day_of_week.")
        else:
            if self.date is not None:
                raise ValueError("Weekly templates must omit date.")
            if self.day_of_week is None:
                raise ValueError("Weekly templates require day_of_week.")
            if not self.is_available:
                raise ValueError("Only overrides can mark a day off.")
        return self


class AvailabilityBlockUpdate(BaseModel):
    """Partial update; the merged row is re-validated by the service"""
    day_of_week: Optional[int] = Field(None, ge=0, le=6)
    date: Optional[date_type] = None
    is_override: Optional[bool] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    is_available: Optional[bool] = None
    reason: Optional[str] = None

    @field_validator("start_time")
    @classmethod
    def validate_start_time(cls, v: Optional[str]) -> Optional[str]:
        return _validate_hhmm(v) if v is not None else v

    @field_validator("end_time")
    @classmethod
    def validate_end_time(cls, v: Optional[str]) -> Optional[str]:
        return _validate_hhmm(v, allow_end_of_day=True) if v is not None else v


class AvailabilityWindow(BaseModel):
    """Minutes since midnight, half-open"""
    start: int
    end: int


class AvailabilityWindowsResponse(BaseModel):
    staff_id: UUID
    date: date_type
    windows: List[AvailabilityWindow] = Field(default_factory=list)


# ============================================================================
# Booking decisions
# ============================================================================

class ResolveBookingRequest(BaseModel):
    service_id: UUID
    start_time: datetime = Field(..., description="Requested start; naive values are read as UTC")
    preferred_staff_id: Optional[UUID] = None

    @field_validator("start_time")
    @classmethod
    def normalize_start_time(cls, v: datetime) -> datetime:
        return to_utc(v)


class ResolveBookingResponse(BaseModel):
    staff_id: Optional[UUID] = Field(None, description="None means unassigned")
    start_time: datetime
    end_time: datetime


class CapacityCheckRequest(BaseModel):
    service_id: UUID
    start_time: datetime
    end_time: datetime
    max_clients_per_slot: int
    exclude_appointment_id: Optional[UUID] = None

    @field_validator("start_time")
    @classmethod
    def normalize_start_time(cls, v: datetime) -> datetime:
        return to_utc(v)

    @field_validator("end_time")
    @classmethod
    def end_after_start(cls, v: datetime, info) -> datetime:
        v = to_utc(v)
        start_time = info.data.get("start_time")
        if start_time and v <= start_time:
            raise ValueError("End time must be after start time")
        return v


class CapacityCheckResponse(BaseModel):
    ok: bool = True
    seats_remaining: int


# ============================================================================
# Services and staff
# ============================================================================

class ServiceCreate(BaseModel):
    """staff_ids is the resolution order: the first id gets display_order 0"""
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    duration_minutes: int = Field(..., ge=5, le=480)
    buffer_before_minutes: int = Field(0, ge=0, le=240)
    buffer_after_minutes: int = Field(0, ge=0, le=240)
    capacity_type: CapacityType = CapacityType.SINGLE
    max_clients_per_slot: int = Field(1, ge=1, le=50)
    allow_any_staff: bool = True
    is_active: bool = True
    display_order: int = Field(default=0)
    staff_ids: Optional[List[UUID]] = None

    @model_validator(mode="after")
    def validate_capacity(self):
        if self.capacity_type == CapacityType.SINGLE and self.max_clients_per_slot != 1:
            raise ValueError("Single-capacity services must have maxClientsPerSlot set to 1.")
        return self


class ServiceUpdate(BaseModel):
    """Partial update; staff_ids, when given, replaces the assignments in order"""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    duration_minutes: Optional[int] = Field(None, ge=5, le=480)
    buffer_before_minutes: Optional[int] = Field(None, ge=0, le=240)
    buffer_after_minutes: Optional[int] = Field(None, ge=0, le=240)
    capacity_type: Optional[CapacityType] = None
    max_clients_per_slot: Optional[int] = Field(None, ge=1, le=50)
    allow_any_staff: Optional[bool] = None
    is_active: Optional[bool] = None
    display_order: Optional[int] = None
    staff_ids: Optional[List[UUID]] = None


class StaffCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    email: Optional[str] = None
    is_active: bool = True


class StaffUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    email: Optional[str] = None
    is_active: Optional[bool] = None


# ============================================================================
# Appointments
# ============================================================================

class AppointmentCreate(BaseModel):
    service_id: UUID
    start_time: datetime
    staff_id: Optional[UUID] = Field(None, description="Preferred staff member")
    customer_id: Optional[UUID] = None
    source: AppointmentSource = AppointmentSource.INTERNAL
    status: AppointmentStatus = AppointmentStatus.PENDING
    notes: Optional[str] = None
    customer_notes: Optional[str] = None

    @field_validator("start_time")
    @classmethod
    def normalize_start_time(cls, v: datetime) -> datetime:
        return to_utc(v)

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: AppointmentStatus) -> AppointmentStatus:
        if v not in (AppointmentStatus.PENDING, AppointmentStatus.CONFIRMED):
            raise ValueError("New appointments must be PENDING or CONFIRMED")
        return v


class AppointmentReschedule(BaseModel):
    start_time: datetime
    staff_id: Optional[UUID] = None

    @field_validator("start_time")
    @classmethod
    def normalize_start_time(cls, v: datetime) -> datetime:
        return to_utc(v)


class AppointmentCancel(BaseModel):
    reason: Optional[str] = None


class AppointmentStatusUpdate(BaseModel):
    status: AppointmentStatus


# ============================================================================
# Classes and waitlists
# ============================================================================

class ClassTemplateCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    class_type: Optional[str] = Field(None, max_length=20)
    description: Optional[str] = None
    duration_minutes: int = Field(..., ge=15, le=360)
    default_capacity: int = Field(..., ge=1, le=30)
    default_instructor_id: Optional[UUID] = None


class ClassTemplateUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    class_type: Optional[str] = Field(None, max_length=20)
    description: Optional[str] = None
    duration_minutes: Optional[int] = Field(None, ge=15, le=360)
    default_capacity: Optional[int] = Field(None, ge=1, le=30)
    default_instructor_id: Optional[UUID] = None
    is_active: Optional[bool] = None


class OccurrenceCreate(BaseModel):
    template_id: UUID
    start_time: datetime
    instructor_id: Optional[UUID] = None
    capacity: Optional[int] = Field(None, ge=1)
    timezone: Optional[str] = None

    @field_validator("start_time")
    @classmethod
    def normalize_start_time(cls, v: datetime) -> datetime:
        return to_utc(v)


class WaitlistJoinRequest(BaseModel):
    customer_id: UUID
