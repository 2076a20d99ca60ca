"""
Unit tests for staff double-booking detection.
"""

from uuid import uuid4

import pytest

from bookly.core.constants import AppointmentStatus, CapacityType
from bookly.core.exceptions import AppointmentConflict
from bookly.services.scheduling.conflict_service import ConflictDetector, buffered_interval
from tests.helpers import at


@pytest.fixture
def staff(make_staff):
    return make_staff()


@pytest.fixture
def buffered_service(make_service, staff):
    """60 minutes with 10 before and 15 after."""
    return make_service(
        staff=[staff], duration_minutes=60, buffer_before_minutes=10, buffer_after_minutes=15, name="Massage"
    )


@pytest.fixture
def quick_service(make_service, staff):
    """30 minutes, no buffers."""
    return make_service(staff=[staff], duration_minutes=30, name="Consult")


def test_buffered_interval(buffered_service):
    """Buffers pad both ends of the booking."""
    assert buffered_interval(buffered_service, at(10)) == (at(9, 50), at(11, 15))
    assert buffered_interval(buffered_service, at(10), at(10, 30)) == (at(9, 50), at(10, 45))


def test_buffers_block_both_directions(db_session, business, staff, buffered_service, quick_service, make_appointment):
    """A buffered 10:00 booking blocks anything ending after 9:50 or starting before 11:15."""
    make_appointment(buffered_service, at(10), staff=staff)

    def conflicts(start):
        return ConflictDetector.service_has_conflict(db_session, business.id, staff.id, quick_service, start)

    assert not conflicts(at(9, 20))
    assert conflicts(at(9, 21))
    assert conflicts(at(11, 14))
    assert not conflicts(at(11, 15))


def test_new_booking_buffers_apply(db_session, business, staff, buffered_service, quick_service, make_appointment):
    """The new booking's own buffers also have to stay clear."""
    make_appointment(quick_service, at(11, 5), staff=staff)

    assert ConflictDetector.service_has_conflict(db_session, business.id, staff.id, buffered_service, at(10))
    assert not ConflictDetector.service_has_conflict(db_session, business.id, staff.id, buffered_service, at(9, 50))


def test_touching_intervals_do_not_conflict(db_session, business, staff, make_service, make_appointment):
    """Intervals are half-open."""
    service = make_service(staff=[staff])
    make_appointment(service, at(10), staff=staff)

    assert not ConflictDetector.service_has_conflict(db_session, business.id, staff.id, service, at(11))
    assert not ConflictDetector.service_has_conflict(db_session, business.id, staff.id, service, at(9))
    assert ConflictDetector.service_has_conflict(db_session, business.id, staff.id, service, at(10, 30))


def test_inactive_appointments_do_not_conflict(db_session, business, staff, make_service, make_appointment):
    """Cancelled and completed appointments free the staff member."""
    service = make_service(staff=[staff])
    make_appointment(service, at(10), staff=staff, status=AppointmentStatus.CANCELLED.value)
    make_appointment(service, at(10), staff=staff, status=AppointmentStatus.COMPLETED.value)

    assert not ConflictDetector.service_has_conflict(db_session, business.id, staff.id, service, at(10))


def test_excluded_appointment_is_ignored(db_session, business, staff, make_service, make_appointment):
    """An appointment being rescheduled does not block itself."""
    service = make_service(staff=[staff])
    existing = make_appointment(service, at(10), staff=staff)

    assert not ConflictDetector.service_has_conflict(
        db_session, business.id, staff.id, service, at(10, 30), exclude_appointment_id=existing.id
    )


def test_shared_slots_only_for_same_service(db_session, business, staff, make_service, make_appointment):
    """MULTI services share a slot with themselves, never with other services."""
    group = make_service(
        staff=[staff], capacity_type=CapacityType.MULTI.value, max_clients_per_slot=3, name="Group"
    )
    private = make_service(staff=[staff], name="Private")
    make_appointment(group, at(10), staff=staff)

    assert not ConflictDetector.service_has_conflict(db_session, business.id, staff.id, group, at(10))
    assert ConflictDetector.service_has_conflict(db_session, business.id, staff.id, private, at(10))


def test_shared_slots_flag(db_session, business, staff, make_service, make_appointment):
    """has_conflict only skips the service when sharing is switched on."""
    service = make_service(staff=[staff])
    make_appointment(service, at(10), staff=staff)

    assert ConflictDetector.has_conflict(db_session, business.id, staff.id, at(10), at(11), service_id=service.id)
    assert not ConflictDetector.has_conflict(
        db_session, business.id, staff.id, at(10), at(11), service_id=service.id, allow_shared_slots=True
    )


def test_unassigned_never_conflicts(db_session, business, staff, make_service, make_appointment):
    """No staff id, no conflict."""
    service = make_service(staff=[staff])
    make_appointment(service, at(10), staff=staff)

    assert not ConflictDetector.has_conflict(db_session, business.id, None, at(10), at(11))


def test_conflicts_are_tenant_scoped(db_session, other_business, staff, make_service, make_appointment):
    """Another tenant's calendar is never consulted."""
    service = make_service(staff=[staff])
    make_appointment(service, at(10), staff=staff)

    assert not ConflictDetector.has_conflict(db_session, other_business.id, staff.id, at(10), at(11))


def test_ensure_no_conflicts_raises(db_session, business, staff, make_service, make_appointment):
    """The raising variant surfaces an AppointmentConflict."""
    service = make_service(staff=[staff])
    make_appointment(service, at(10), staff=staff)

    with pytest.raises(AppointmentConflict):
        ConflictDetector.ensure_no_conflicts(db_session, business.id, staff.id, service, at(10))

    ConflictDetector.ensure_no_conflicts(db_session, business.id, uuid4(), service, at(10))
