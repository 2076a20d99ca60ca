"""
Pytest configuration and shared fixtures.
Every test gets a fresh in-memory SQLite schema.
"""

import os

os.environ["DATABASE_URL"] = "sqlite://"

from datetime import timedelta

import pytest

from bookly.config.database import SessionLocal, engine
from bookly.core.constants import AppointmentStatus, CapacityType
from bookly.models import (
    Appointment,
    AvailabilityBlock,
    Base,
    Business,
    ClassOccurrence,
    ClassTemplate,
    Customer,
    Service,
    ServiceStaff,
    StaffMember,
)
from tests.helpers import at


@pytest.fixture
def db_session():
    """Session bound to a freshly created schema."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def business(db_session):
    """The tenant most tests act for."""
    business = Business(name="Studio North", timezone="UTC", is_active=True)
    db_session.add(business)
    db_session.commit()
    return business


@pytest.fixture
def other_business(db_session):
    """A second tenant, for isolation checks."""
    business = Business(name="Studio South", timezone="UTC", is_active=True)
    db_session.add(business)
    db_session.commit()
    return business


@pytest.fixture
def make_staff(db_session, business):
    """Create staff members."""

    def _make(name="Alex", is_active=True, tenant=None):
        staff = StaffMember(
            business_id=(tenant or business).id,
            name=name,
            is_active=is_active,
        )
        db_session.add(staff)
        db_session.commit()
        return staff

    return _make


@pytest.fixture
def make_service(db_session, business):
    """Create a service and assign staff to it in the given order."""

    def _make(
        staff=(),
        duration_minutes=60,
        buffer_before_minutes=0,
        buffer_after_minutes=0,
        capacity_type=CapacityType.SINGLE.value,
        max_clients_per_slot=1,
        allow_any_staff=False,
        name="Private Session",
        tenant=None,
    ):
        tenant = tenant or business
        service = Service(
            business_id=tenant.id,
            name=name,
            duration_minutes=duration_minutes,
            buffer_before_minutes=buffer_before_minutes,
            buffer_after_minutes=buffer_after_minutes,
            capacity_type=capacity_type,
            max_clients_per_slot=max_clients_per_slot,
            allow_any_staff=allow_any_staff,
        )
        db_session.add(service)
        db_session.flush()

        for order, member in enumerate(staff):
            db_session.add(
                ServiceStaff(
                    business_id=tenant.id,
                    service_id=service.id,
                    staff_id=member.id,
                    display_order=order,
                )
            )

        db_session.commit()
        return service

    return _make


@pytest.fixture
def add_block(db_session, business):
    """Create availability blocks; pass on_date for an override."""

    def _add(staff, start_time, end_time, day_of_week=None, on_date=None, is_available=True):
        block = AvailabilityBlock(
            business_id=business.id,
            staff_id=staff.id,
            is_override=on_date is not None,
            day_of_week=None if on_date is not None else day_of_week,
            date=on_date,
            start_time=start_time,
            end_time=end_time,
            is_available=is_available,
        )
        db_session.add(block)
        db_session.commit()
        return block

    return _add


@pytest.fixture
def make_appointment(db_session, business):
    """Insert an appointment row directly, bypassing the engine."""

    def _make(service, start, staff=None, status=AppointmentStatus.CONFIRMED.value, end=None):
        appointment = Appointment(
            business_id=business.id,
            service_id=service.id,
            staff_id=staff.id if staff else None,
            start_time=start,
            end_time=end or start + timedelta(minutes=service.duration_minutes),
            status=status,
        )
        db_session.add(appointment)
        db_session.commit()
        return appointment

    return _make


@pytest.fixture
def make_customer(db_session, business):
    """Create customers."""

    def _make(first_name="Sam", tenant=None):
        customer = Customer(business_id=(tenant or business).id, first_name=first_name)
        db_session.add(customer)
        db_session.commit()
        return customer

    return _make


@pytest.fixture
def class_template(db_session, business):
    """A 50 minute mat class for 10."""
    template = ClassTemplate(
        business_id=business.id,
        name="Mat Pilates",
        class_type="MAT",
        duration_minutes=50,
        default_capacity=10,
    )
    db_session.add(template)
    db_session.commit()
    return template


@pytest.fixture
def make_occurrence(db_session, business, class_template):
    """Create an occurrence with a given fill level."""

    def _make(capacity=2, booked_count=0, start=None):
        start = start or at(18)
        occurrence = ClassOccurrence(
            business_id=business.id,
            template_id=class_template.id,
            start_time=start,
            end_time=start + timedelta(minutes=class_template.duration_minutes),
            capacity=capacity,
            booked_count=booked_count,
            waitlist_count=0,
            status="SCHEDULED",
        )
        db_session.add(occurrence)
        db_session.commit()
        return occurrence

    return _make
