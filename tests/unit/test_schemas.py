"""
Unit tests for request validation.
"""

from datetime import date, datetime, timedelta, timezone
from uuid import uuid4

import pytest
from pydantic import ValidationError

from bookly.schemas.scheduling import (
    AppointmentCreate,
    AvailabilityBlockCreate,
    AvailabilityBlockUpdate,
    CapacityCheckRequest,
    OccurrenceCreate,
    ResolveBookingRequest,
    ServiceCreate,
)
from tests.helpers import at


def test_weekly_template_block():
    """Times are normalised to zero padded HH:MM."""
    block = AvailabilityBlockCreate(day_of_week=1, start_time="9:00", end_time="17:30")

    assert block.start_time == "09:00"
    assert block.end_time == "17:30"
    assert not block.is_override


def test_day_off_override_block():
    """Overrides carry a date and may mark the day off."""
    block = AvailabilityBlockCreate(
        is_override=True, date=date(2025, 12, 25), start_time="00:00", end_time="23:59", is_available=False
    )

    assert block.date == date(2025, 12, 25)
    assert block.day_of_week is None


@pytest.mark.parametrize(
    "payload",
    [
        {"day_of_week": 1, "start_time": "25:00", "end_time": "26:00"},
        {"day_of_week": 1, "start_time": "10:00", "end_time": "10:00"},
        {"day_of_week": 1, "start_time": "12:00", "end_time": "09:00"},
        {"day_of_week": 7, "start_time": "09:00", "end_time": "10:00"},
        {"is_override": True, "start_time": "09:00", "end_time": "10:00"},
        {"is_override": True, "date": "2025-03-03", "day_of_week": 1, "start_time": "09:00", "end_time": "10:00"},
        {"date": "2025-03-03", "start_time": "09:00", "end_time": "10:00"},
        {"start_time": "09:00", "end_time": "10:00"},
        {"day_of_week": 1, "start_time": "09:00", "end_time": "10:00", "is_available": False},
        {"day_of_week": 1, "start_time": "24:00", "end_time": "24:00"},
        {"day_of_week": 1, "start_time": "09:00", "end_time": "24:30"},
    ],
)
def test_invalid_blocks(payload):
    """Malformed times, inverted windows and mixed template/override rows are rejected."""
    with pytest.raises(ValidationError):
        AvailabilityBlockCreate(**payload)


def test_new_appointments_must_be_active():
    """Appointments start out PENDING or CONFIRMED."""
    assert AppointmentCreate(service_id=uuid4(), start_time=at(10), status="CONFIRMED").status == "CONFIRMED"

    with pytest.raises(ValidationError):
        AppointmentCreate(service_id=uuid4(), start_time=at(10), status="CANCELLED")


def test_capacity_check_needs_a_real_interval():
    with pytest.raises(ValidationError):
        CapacityCheckRequest(service_id=uuid4(), start_time=at(11), end_time=at(10), max_clients_per_slot=3)


def test_occurrence_capacity_must_be_positive():
    with pytest.raises(ValidationError):
        OccurrenceCreate(template_id=uuid4(), start_time=at(18), capacity=0)


def test_end_of_day_block():
    """24:00 closes a window at midnight; it is only accepted as an end."""
    block = AvailabilityBlockCreate(day_of_week=1, start_time="20:00", end_time="24:00")

    assert block.end_time == "24:00"
    assert AvailabilityBlockUpdate(end_time="24:00").end_time == "24:00"

    with pytest.raises(ValidationError):
        AvailabilityBlockUpdate(start_time="24:00")


def test_start_times_are_normalised_to_utc():
    """Naive starts are read as UTC and offsets are converted."""
    naive = ResolveBookingRequest(service_id=uuid4(), start_time="2025-03-03T10:00:00")
    offset = AppointmentCreate(service_id=uuid4(), start_time="2025-03-03T12:00:00+02:00")

    assert naive.start_time == datetime(2025, 3, 3, 10, tzinfo=timezone.utc)
    assert offset.start_time == datetime(2025, 3, 3, 10, tzinfo=timezone.utc)
    assert offset.start_time.utcoffset() == timedelta(0)


def test_capacity_check_mixes_naive_and_aware():
    """Both ends are compared in UTC."""
    request = CapacityCheckRequest(
        service_id=uuid4(),
        start_time="2025-03-03T10:00:00",
        end_time="2025-03-03T13:00:00+02:00",
        max_clients_per_slot=3,
    )

    assert request.end_time - request.start_time == timedelta(hours=1)


def test_single_capacity_services_hold_one_seat():
    """maxClientsPerSlot must be 1 for SINGLE services."""
    assert ServiceCreate(name="Massage", duration_minutes=60, staff_ids=[uuid4()]).max_clients_per_slot == 1
    assert ServiceCreate(
        name="Spin", duration_minutes=45, capacity_type="MULTI", max_clients_per_slot=12
    ).max_clients_per_slot == 12

    with pytest.raises(ValidationError):
        ServiceCreate(name="Massage", duration_minutes=60, max_clients_per_slot=2)
