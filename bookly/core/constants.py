# bookly/core/constants.py
"""Status and type vocabularies shared by models, schemas and services"""
from enum import Enum


class AppointmentStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"


# Only these count toward staff conflicts and seat usage
ACTIVE_APPOINTMENT_STATUSES = [AppointmentStatus.PENDING.value, AppointmentStatus.CONFIRMED.value]


class AppointmentSource(str, Enum):
    INTERNAL = "INTERNAL"
    PUBLIC = "PUBLIC"
    CLIENT_PORTAL = "CLIENT_PORTAL"


class CapacityType(str, Enum):
    SINGLE = "SINGLE"
    MULTI = "MULTI"


class OccurrenceStatus(str, Enum):
    SCHEDULED = "SCHEDULED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"


class WaitlistStatus(str, Enum):
    PENDING = "PENDING"
    PROMOTED = "PROMOTED"
    REMOVED = "REMOVED"


MINUTES_PER_DAY = 24 * 60

# Upper bound on a service buffer; bounds the lookback when scanning neighbours' buffers
MAX_BUFFER_MINUTES = 24 * 60
