"""
Unit tests for staff assignment.
"""

from uuid import uuid4

import pytest

from bookly.core.exceptions import NoStaffAssigned, NoStaffAvailable, StaffNotEligible
from bookly.repositories.service_repository import ServiceRepository
from bookly.services.scheduling.staff_resolver import StaffResolver
from tests.helpers import at


@pytest.fixture
def team(make_staff):
    return make_staff("Ana"), make_staff("Ben")


def test_first_candidate_wins_every_time(db_session, business, team, make_service):
    """Resolution is deterministic for identical inputs."""
    ana, ben = team
    service = make_service(staff=[ana, ben])

    for _ in range(3):
        assert StaffResolver.resolve(db_session, service, business.id, at(10), at(11)) == ana.id


def test_display_order_ties_break_on_staff_id(db_session, business, team, make_service):
    """Equal display_order falls back to the lower staff id."""
    ana, ben = team
    service = make_service()
    ServiceRepository.assign_staff(db_session, business.id, service, ben, display_order=0)
    ServiceRepository.assign_staff(db_session, business.id, service, ana, display_order=0)

    expected = min(ana.id, ben.id)

    assert StaffResolver.resolve(db_session, service, business.id, at(10), at(11)) == expected


def test_busy_candidate_is_skipped(db_session, business, team, make_service, make_appointment):
    """A conflicting calendar moves resolution to the next candidate."""
    ana, ben = team
    service = make_service(staff=[ana, ben])
    make_appointment(service, at(10), staff=ana)

    assert StaffResolver.resolve(db_session, service, business.id, at(10), at(11)) == ben.id


def test_unavailable_candidate_is_skipped(db_session, business, team, make_service, add_block):
    """Working hours are checked before the calendar."""
    ana, ben = team
    service = make_service(staff=[ana, ben])
    add_block(ana, "13:00", "17:00", day_of_week=1)

    assert StaffResolver.resolve(db_session, service, business.id, at(10), at(11)) == ben.id


def test_inactive_staff_are_never_offered(db_session, business, make_staff, make_service):
    """Deactivated staff drop out of the candidate list."""
    gone = make_staff("Cleo", is_active=False)
    ben = make_staff("Ben")
    service = make_service(staff=[gone, ben])

    assert StaffResolver.list_eligible_staff(db_session, service, business.id) == [ben]
    assert StaffResolver.resolve(db_session, service, business.id, at(10), at(11)) == ben.id


def test_preferred_staff_is_honoured(db_session, business, team, make_service):
    """A valid preference narrows the candidates to that person."""
    ana, ben = team
    service = make_service(staff=[ana, ben])

    assert StaffResolver.resolve(
        db_session, service, business.id, at(10), at(11), preferred_staff_id=ben.id
    ) == ben.id


def test_busy_preferred_staff_is_not_replaced(db_session, business, team, make_service, make_appointment):
    """A preference never silently falls through to someone else."""
    ana, ben = team
    service = make_service(staff=[ana, ben])
    make_appointment(service, at(10), staff=ben)

    with pytest.raises(NoStaffAvailable):
        StaffResolver.resolve(db_session, service, business.id, at(10), at(11), preferred_staff_id=ben.id)


def test_preference_outside_service_is_rejected(db_session, business, team, make_staff, make_service):
    """Unassigned, inactive or foreign staff are not eligible."""
    ana, ben = team
    service = make_service(staff=[ana])
    inactive = make_staff("Dee", is_active=False)
    ServiceRepository.assign_staff(db_session, business.id, service, inactive, display_order=5)

    for staff_id in (ben.id, inactive.id, uuid4()):
        with pytest.raises(StaffNotEligible):
            StaffResolver.resolve(db_session, service, business.id, at(10), at(11), preferred_staff_id=staff_id)


def test_foreign_tenant_staff_is_rejected(db_session, business, other_business, make_staff, make_service):
    """Assignments never cross tenants."""
    outsider = make_staff("Eve", tenant=other_business)
    service = make_service(staff=[outsider])

    with pytest.raises(NoStaffAssigned):
        StaffResolver.resolve(db_session, service, business.id, at(10), at(11))


def test_no_staff_assigned(db_session, business, make_service):
    """A service nobody performs cannot be booked..."""
    service = make_service()

    with pytest.raises(NoStaffAssigned):
        StaffResolver.resolve(db_session, service, business.id, at(10), at(11))


def test_no_staff_assigned_allows_any_staff(db_session, business, make_service):
    """...unless it may be booked unassigned."""
    service = make_service(allow_any_staff=True)

    assert StaffResolver.resolve(db_session, service, business.id, at(10), at(11)) is None


def test_everyone_busy(db_session, business, team, make_service, make_appointment):
    """No free candidate means NoStaffAvailable."""
    ana, ben = team
    service = make_service(staff=[ana, ben])
    make_appointment(service, at(10), staff=ana)
    make_appointment(service, at(10), staff=ben)

    with pytest.raises(NoStaffAvailable):
        StaffResolver.resolve(db_session, service, business.id, at(10), at(11))


def test_service_assignments_follow_resolution_order(db_session, business, team, make_service):
    """The ORM view of assignments uses the same order as the resolver."""
    ana, ben = team
    service = make_service(staff=[ben, ana])

    assert [assignment.staff_id for assignment in service.staff_assignments] == [ben.id, ana.id]
    assert [staff.id for staff in StaffResolver.list_eligible_staff(db_session, service, business.id)] == [
        ben.id,
        ana.id,
    ]
