"""
Unit tests for appointment writes.
"""

from datetime import datetime, timezone
from uuid import uuid4

import pytest

from bookly.core.constants import AppointmentSource, AppointmentStatus, CapacityType
from bookly.core.exceptions import (
    AppointmentNotFound,
    CustomerNotFound,
    NoStaffAvailable,
    SchedulingError,
    SeatsExhausted,
    SlotUnavailable,
    StaffNotEligible,
)
from bookly.models import Appointment
from bookly.services.appointment.appointment_service import AppointmentService
from bookly.services.scheduling.booking_engine import BookingDecision, BookingDecisionEngine
from tests.helpers import at


@pytest.fixture
def staff(make_staff):
    return make_staff("X")


@pytest.fixture
def service(make_service, staff):
    return make_service(staff=[staff])


def test_book_appointment_persists_decision(db_session, business, staff, service, make_customer):
    """The resolved staff member and computed end are stored."""
    customer = make_customer()

    appointment = AppointmentService.book_appointment(
        db_session,
        business.id,
        service.id,
        at(10),
        customer_id=customer.id,
        source=AppointmentSource.PUBLIC.value,
        notes="First visit",
    )

    assert appointment.staff_id == staff.id
    assert appointment.start_time == at(10)
    assert appointment.end_time == at(11)
    assert appointment.status == AppointmentStatus.PENDING.value
    assert appointment.source == AppointmentSource.PUBLIC.value
    assert appointment.customer_id == customer.id


def test_second_booking_in_same_slot_is_refused(db_session, business, service):
    """The staff member is now busy."""
    AppointmentService.book_appointment(db_session, business.id, service.id, at(10))

    with pytest.raises(NoStaffAvailable):
        AppointmentService.book_appointment(db_session, business.id, service.id, at(10, 30))


def test_multi_capacity_accepts_exactly_max_clients(db_session, business, make_service):
    """Three seats take three bookings; cancelling one makes room again."""
    group = make_service(
        capacity_type=CapacityType.MULTI.value, max_clients_per_slot=3, allow_any_staff=True, name="Group"
    )

    booked = [AppointmentService.book_appointment(db_session, business.id, group.id, at(10)) for _ in range(3)]

    with pytest.raises(SeatsExhausted):
        AppointmentService.book_appointment(db_session, business.id, group.id, at(10))

    AppointmentService.cancel_appointment(db_session, business.id, booked[0].id)

    fourth = AppointmentService.book_appointment(db_session, business.id, group.id, at(10))
    assert fourth.is_active


def test_recheck_catches_a_lost_race(db_session, business, staff, service, make_appointment, monkeypatch):
    """A stale decision is refused at write time and nothing is stored."""
    make_appointment(service, at(10), staff=staff)
    stale = BookingDecision(staff_id=staff.id, start=at(10), end=at(11))
    monkeypatch.setattr(BookingDecisionEngine, "resolve_booking", lambda *args, **kwargs: stale)

    with pytest.raises(SlotUnavailable):
        AppointmentService.book_appointment(db_session, business.id, service.id, at(10))

    assert db_session.query(Appointment).count() == 1


def test_reschedule_moves_the_appointment(db_session, business, staff, service):
    """An appointment may move into a slot overlapping its old one."""
    appointment = AppointmentService.book_appointment(db_session, business.id, service.id, at(10))

    moved = AppointmentService.reschedule_appointment(db_session, business.id, appointment.id, at(10, 30))

    assert moved.start_time == at(10, 30)
    assert moved.end_time == at(11, 30)
    assert moved.staff_id == staff.id


def test_reschedule_into_busy_slot_is_refused(db_session, business, service):
    """Other bookings still block the move."""
    first = AppointmentService.book_appointment(db_session, business.id, service.id, at(9))
    AppointmentService.book_appointment(db_session, business.id, service.id, at(10))

    with pytest.raises(NoStaffAvailable):
        AppointmentService.reschedule_appointment(db_session, business.id, first.id, at(9, 30))

    assert first.start_time == at(9)


def test_cancelled_appointments_cannot_be_rescheduled(db_session, business, service):
    """Only active appointments move."""
    appointment = AppointmentService.book_appointment(db_session, business.id, service.id, at(10))
    AppointmentService.cancel_appointment(db_session, business.id, appointment.id)

    with pytest.raises(SchedulingError):
        AppointmentService.reschedule_appointment(db_session, business.id, appointment.id, at(12))


def test_cancel_frees_the_slot_and_is_idempotent(db_session, business, service):
    """Cancelling twice is harmless, and the slot can be rebooked."""
    appointment = AppointmentService.book_appointment(db_session, business.id, service.id, at(10))

    cancelled = AppointmentService.cancel_appointment(db_session, business.id, appointment.id, reason="Sick")
    again = AppointmentService.cancel_appointment(db_session, business.id, appointment.id)

    assert again.status == AppointmentStatus.CANCELLED.value
    assert cancelled.cancellation_reason == "Sick"
    assert cancelled.cancelled_at is not None

    AppointmentService.book_appointment(db_session, business.id, service.id, at(10))


def test_reactivation_rechecks_the_slot(db_session, business, service):
    """A cancelled appointment cannot be confirmed into a taken slot."""
    original = AppointmentService.book_appointment(db_session, business.id, service.id, at(10))
    AppointmentService.cancel_appointment(db_session, business.id, original.id)
    AppointmentService.book_appointment(db_session, business.id, service.id, at(10))

    with pytest.raises(NoStaffAvailable):
        AppointmentService.update_status(
            db_session, business.id, original.id, AppointmentStatus.CONFIRMED.value
        )

    assert original.status == AppointmentStatus.CANCELLED.value


def test_reactivation_requires_an_active_staff_member(db_session, business, staff, service):
    """Confirming a cancelled appointment again is refused once its staff member is deactivated."""
    appointment = AppointmentService.book_appointment(db_session, business.id, service.id, at(10))
    AppointmentService.cancel_appointment(db_session, business.id, appointment.id)
    staff.is_active = False
    db_session.commit()

    with pytest.raises(StaffNotEligible):
        AppointmentService.update_status(
            db_session, business.id, appointment.id, AppointmentStatus.CONFIRMED.value
        )

    db_session.refresh(appointment)
    assert appointment.status == AppointmentStatus.CANCELLED.value


def test_reactivation_respects_availability(db_session, business, staff, service, add_block):
    """A day off added after cancelling keeps the appointment cancelled."""
    appointment = AppointmentService.book_appointment(db_session, business.id, service.id, at(10))
    AppointmentService.cancel_appointment(db_session, business.id, appointment.id)
    add_block(staff, "00:00", "23:59", on_date=at(10).date(), is_available=False)

    with pytest.raises(NoStaffAvailable):
        AppointmentService.update_status(
            db_session, business.id, appointment.id, AppointmentStatus.PENDING.value
        )


def test_timezone_aware_bookings(db_session, business, staff, service):
    """Aware start times are compared with stored times without error."""
    utc = timezone.utc
    first = AppointmentService.book_appointment(
        db_session, business.id, service.id, datetime(2025, 3, 3, 9, tzinfo=utc)
    )
    second = AppointmentService.book_appointment(
        db_session, business.id, service.id, datetime(2025, 3, 3, 11, tzinfo=utc)
    )

    assert first.staff_id == staff.id
    assert second.staff_id == staff.id

    with pytest.raises(NoStaffAvailable):
        AppointmentService.book_appointment(
            db_session, business.id, service.id, datetime(2025, 3, 3, 11, 30, tzinfo=utc)
        )

    assert db_session.query(Appointment).count() == 2


def test_confirm_and_complete(db_session, business, service):
    """Plain status changes on an active appointment."""
    appointment = AppointmentService.book_appointment(db_session, business.id, service.id, at(10))

    confirmed = AppointmentService.update_status(
        db_session, business.id, appointment.id, AppointmentStatus.CONFIRMED.value
    )
    assert confirmed.status == AppointmentStatus.CONFIRMED.value

    completed = AppointmentService.update_status(
        db_session, business.id, appointment.id, AppointmentStatus.COMPLETED.value
    )
    assert not completed.is_active


def test_invalid_requests(db_session, business, other_business, service):
    """Bad status, unknown customer and foreign appointments are refused."""
    with pytest.raises(SchedulingError):
        AppointmentService.book_appointment(
            db_session, business.id, service.id, at(10), status=AppointmentStatus.COMPLETED.value
        )

    with pytest.raises(CustomerNotFound):
        AppointmentService.book_appointment(db_session, business.id, service.id, at(10), customer_id=uuid4())

    appointment = AppointmentService.book_appointment(db_session, business.id, service.id, at(10))

    with pytest.raises(AppointmentNotFound):
        AppointmentService.cancel_appointment(db_session, other_business.id, appointment.id)
