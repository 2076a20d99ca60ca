"""
Unit tests for the booking decision gate.
"""

from datetime import timedelta
from uuid import uuid4

import pytest

from bookly.core.constants import CapacityType
from bookly.core.exceptions import NoStaffAvailable, SeatsExhausted, ServiceNotFound
from bookly.services.scheduling.booking_engine import BookingDecision, BookingDecisionEngine
from tests.helpers import TUESDAY, at


def test_back_to_back_scenario(db_session, business, make_staff, make_service, make_appointment):
    """X is busy 09:00-10:00: 09:30 is refused, 10:00 goes to X."""
    x = make_staff("X")
    service = make_service(staff=[x], duration_minutes=60)
    make_appointment(service, at(9), staff=x)

    with pytest.raises(NoStaffAvailable):
        BookingDecisionEngine.resolve_booking(db_session, service, business.id, at(9, 30))

    decision = BookingDecisionEngine.resolve_booking(db_session, service, business.id, at(10))

    assert decision == BookingDecision(staff_id=x.id, start=at(10), end=at(11))


def test_end_follows_duration(db_session, business, make_staff, make_service):
    """The decided interval is start plus the service duration."""
    x = make_staff("X")
    service = make_service(staff=[x], duration_minutes=45)

    decision = BookingDecisionEngine.resolve_booking(db_session, service, business.id, at(10))

    assert decision.end - decision.start == timedelta(minutes=45)
    assert decision.to_dict()["staff_id"] == str(x.id)


def test_late_booking_runs_past_midnight(db_session, business, make_staff, make_service):
    """Staff without configured hours can take a 23:30 booking that ends the next day."""
    x = make_staff("X")
    service = make_service(staff=[x], duration_minutes=60)

    decision = BookingDecisionEngine.resolve_booking(db_session, service, business.id, at(23, 30))

    assert decision == BookingDecision(staff_id=x.id, start=at(23, 30), end=at(0, 30, on=TUESDAY))


def test_multi_capacity_is_checked_before_staff(db_session, business, make_staff, make_service, make_appointment):
    """A full MULTI slot reports SeatsExhausted, not a staff problem."""
    x = make_staff("X")
    service = make_service(staff=[x], capacity_type=CapacityType.MULTI.value, max_clients_per_slot=2)
    make_appointment(service, at(10), staff=x)
    make_appointment(service, at(10), staff=x)

    with pytest.raises(SeatsExhausted):
        BookingDecisionEngine.resolve_booking(db_session, service, business.id, at(10))


def test_multi_capacity_shares_the_instructor(db_session, business, make_staff, make_service, make_appointment):
    """Clients of the same MULTI service share one staff member's slot."""
    x = make_staff("X")
    service = make_service(staff=[x], capacity_type=CapacityType.MULTI.value, max_clients_per_slot=2)
    make_appointment(service, at(10), staff=x)

    decision = BookingDecisionEngine.resolve_booking(db_session, service, business.id, at(10))

    assert decision.staff_id == x.id


def test_unassigned_single_service_holds_one_seat(db_session, business, make_service, make_appointment):
    """Without staff exclusivity the single seat is counted instead."""
    service = make_service(allow_any_staff=True)

    decision = BookingDecisionEngine.resolve_booking(db_session, service, business.id, at(10))
    assert decision.staff_id is None

    make_appointment(service, at(10))

    with pytest.raises(SeatsExhausted):
        BookingDecisionEngine.resolve_booking(db_session, service, business.id, at(10, 30))


def test_rescheduled_appointment_does_not_block_itself(db_session, business, make_staff, make_service, make_appointment):
    """Moving a booking within its own slot is allowed."""
    x = make_staff("X")
    service = make_service(staff=[x])
    existing = make_appointment(service, at(10), staff=x)

    decision = BookingDecisionEngine.resolve_booking(
        db_session, service, business.id, at(10, 30), exclude_appointment_id=existing.id
    )

    assert decision.staff_id == x.id


def test_load_service_is_tenant_scoped(db_session, business, other_business, make_service):
    """Unknown or foreign services are not found."""
    service = make_service()

    assert BookingDecisionEngine.load_service(db_session, business.id, service.id) is service

    with pytest.raises(ServiceNotFound):
        BookingDecisionEngine.load_service(db_session, other_business.id, service.id)

    with pytest.raises(ServiceNotFound):
        BookingDecisionEngine.load_service(db_session, business.id, uuid4())
