# bookly/schemas/__init__.py
from .scheduling import (
    AvailabilityBlockCreate,
    AvailabilityBlockUpdate,
    AvailabilityWindow,
    AvailabilityWindowsResponse,
    ResolveBookingRequest,
    ResolveBookingResponse,
    CapacityCheckRequest,
    CapacityCheckResponse,
    ServiceCreate,
    ServiceUpdate,
    StaffCreate,
    StaffUpdate,
    AppointmentCreate,
    AppointmentReschedule,
    AppointmentCancel,
    AppointmentStatusUpdate,
    ClassTemplateCreate,
    ClassTemplateUpdate,
    OccurrenceCreate,
    WaitlistJoinRequest,
)

__all__ = [
    "AvailabilityBlockCreate",
    "AvailabilityBlockUpdate",
    "AvailabilityWindow",
    "AvailabilityWindowsResponse",
    "ResolveBookingRequest",
    "ResolveBookingResponse",
    "CapacityCheckRequest",
    "CapacityCheckResponse",
    "ServiceCreate",
    "ServiceUpdate",
    "StaffCreate",
    "StaffUpdate",
    "AppointmentCreate",
    "AppointmentReschedule",
    "AppointmentCancel",
    "AppointmentStatusUpdate",
    "ClassTemplateCreate",
    "ClassTemplateUpdate",
    "OccurrenceCreate",
    "WaitlistJoinRequest",
]
