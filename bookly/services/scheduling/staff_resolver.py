# ===== bookly/services/scheduling/staff_resolver.py =====
"""Picks the staff member for a booking, or validates the requested one"""
from datetime import datetime
from typing import List, Optional
from uuid import UUID
import logging

from sqlalchemy.orm import Session

from bookly.core.exceptions import NoStaffAssigned, NoStaffAvailable, StaffNotEligible
from bookly.models.service import Service
from bookly.models.staff import StaffMember
from bookly.repositories.service_repository import ServiceRepository
from bookly.services.availability.availability_service import AvailabilityService
from bookly.services.scheduling.conflict_service import ConflictDetector

logger = logging.getLogger(__name__)


class StaffResolver:
    """Deterministic, order-sensitive staff assignment"""

    @staticmethod
    def list_eligible_staff(
            db: Session,
            service: Service,
            business_id: UUID,
            preferred_staff_id: Optional[UUID] = None
    ) -> List[StaffMember]:
        """Active staff of the tenant assigned to the service, in resolution order"""
        return ServiceRepository.get_assigned_staff(
            db, business_id, service.id, restrict_to_staff_id=preferred_staff_id
        )

    @staticmethod
    def resolve(
            db: Session,
            service: Service,
            business_id: UUID,
            start: datetime,
            end: datetime,
            preferred_staff_id: Optional[UUID] = None,
            exclude_appointment_id: Optional[UUID] = None
    ) -> Optional[UUID]:
        """
        Return the staff id to book, or None for an unassigned booking.

        1. Candidates are the assigned, active, same-tenant staff, narrowed to
           the preferred staff member when one is given
        2. A preference outside that set is rejected (StaffNotEligible)
        3. No candidates: None if the service allows any staff, else NoStaffAssigned
        4. First candidate whose availability covers [start, end) and whose
           buffered calendar is free wins; none -> NoStaffAvailable
        """
        candidates = StaffResolver.list_eligible_staff(db, service, business_id, preferred_staff_id)

        if preferred_staff_id and not any(candidate.id == preferred_staff_id for candidate in candidates):
            raise StaffNotEligible()

        if not candidates:
            if service.allow_any_staff:
                logger.debug(f"Service {service.id} has no staff assigned; booking unassigned")
                return None
            raise NoStaffAssigned()

        for candidate in candidates:
            if not AvailabilityService.is_available_during(db, business_id, candidate.id, start, end):
                logger.debug(f"Staff {candidate.id} outside availability for {start}-{end}")
                continue

            if ConflictDetector.service_has_conflict(
                db, business_id, candidate.id, service, start, end, exclude_appointment_id
            ):
                continue

            return candidate.id

        raise NoStaffAvailable()
