# bookly/core/exceptions.py
"""
Typed scheduling errors.
Raised by the scheduling services, mapped to HTTP responses in bookly.main.
None of them are retried by the engine; the caller decides.
"""


class SchedulingError(Exception):
    """Base class for every decision the engine can reject a request with."""
    status_code = 400
    code = "scheduling_error"
    default_message = "Scheduling request rejected."

    def __init__(self, message: str = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    def to_dict(self):
        return {"message": self.message, "code": self.code}


# ----------------------------------------------------------------------------
# Staff resolution
# ----------------------------------------------------------------------------

class StaffNotEligible(SchedulingError):
    code = "staff_not_eligible"
    default_message = "Selected staff is not available for this service."


class NoStaffAssigned(SchedulingError):
    code = "no_staff_assigned"
    default_message = "No staff members are assigned to this service."


class NoStaffAvailable(SchedulingError):
    status_code = 409
    code = "no_staff_available"
    default_message = "No staff members are available at the selected time."


# ----------------------------------------------------------------------------
# Conflicts and capacity
# ----------------------------------------------------------------------------

class ConflictError(SchedulingError):
    status_code = 409
    code = "conflict"
    default_message = "Scheduling conflict detected."


class AppointmentConflict(ConflictError):
    code = "appointment_conflict"
    default_message = "Appointment conflict detected."


class SlotUnavailable(AppointmentConflict):
    """The commit-time re-check failed: another booking won the race."""
    code = "slot_unavailable"
    default_message = "This slot just became unavailable. Please pick another time."


class SeatsExhausted(ConflictError):
    code = "seats_exhausted"
    default_message = "All seats are taken for this slot."


class InvalidCapacityConfiguration(SchedulingError):
    """maxClientsPerSlot <= 0 is a configuration bug, not a full slot."""
    status_code = 500
    code = "invalid_capacity_configuration"
    default_message = "Service capacity must be at least 1 seat."


# ----------------------------------------------------------------------------
# Classes and waitlists
# ----------------------------------------------------------------------------

class ClassStillFull(ConflictError):
    code = "class_still_full"
    default_message = "Class still full. No seats available."


class NoWaitlistEntries(ConflictError):
    code = "no_waitlist_entries"
    default_message = "No pending waitlist entries."


# ----------------------------------------------------------------------------
# Configuration writes
# ----------------------------------------------------------------------------

class InvalidConfiguration(SchedulingError):
    """A management write would leave the engine's inputs inconsistent."""
    status_code = 422
    code = "invalid_configuration"
    default_message = "Invalid configuration."


class InvalidAvailabilityBlock(InvalidConfiguration):
    code = "invalid_availability_block"
    default_message = "Invalid availability block."


class InvalidServiceConfiguration(InvalidConfiguration):
    code = "invalid_service_configuration"
    default_message = "Single-capacity services must have maxClientsPerSlot set to 1."


# ----------------------------------------------------------------------------
# Lookups
# ----------------------------------------------------------------------------

class NotFoundError(SchedulingError):
    status_code = 404
    code = "not_found"
    default_message = "Resource not found."


class ServiceNotFound(NotFoundError):
    code = "service_not_found"
    default_message = "Service not found."


class StaffNotFound(NotFoundError):
    code = "staff_not_found"
    default_message = "Staff member not found."


class AppointmentNotFound(NotFoundError):
    code = "appointment_not_found"
    default_message = "Appointment not found."


class ClassTemplateNotFound(NotFoundError):
    code = "class_template_not_found"
    default_message = "Class template not found."


class ClassOccurrenceNotFound(NotFoundError):
    code = "class_occurrence_not_found"
    default_message = "Class occurrence not found."


class CustomerNotFound(NotFoundError):
    code = "customer_not_found"
    default_message = "Customer not found."


class WaitlistEntryNotFound(NotFoundError):
    code = "waitlist_entry_not_found"
    default_message = "Waitlist entry not found."


class AvailabilityBlockNotFound(NotFoundError):
    code = "availability_block_not_found"
    default_message = "Availability block not found."
