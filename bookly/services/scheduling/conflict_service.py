# ===== bookly/services/scheduling/conflict_service.py =====
"""Staff double-booking detection with service buffers"""
from datetime import datetime, timedelta
from typing import Optional, Tuple
from uuid import UUID
import logging

from sqlalchemy.orm import Session

from bookly.core.exceptions import AppointmentConflict
from bookly.models.service import Service
from bookly.repositories.appointment_repository import AppointmentRepository

logger = logging.getLogger(__name__)


def buffered_interval(service: Service, start: datetime, end: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    """
    Pad [start, end) with the service's buffers.
    end defaults to start + the service duration.
    """
    computed_end = end or start + timedelta(minutes=service.duration_minutes)
    return (
        start - timedelta(minutes=service.buffer_before_minutes or 0),
        computed_end + timedelta(minutes=service.buffer_after_minutes or 0),
    )


class ConflictDetector:
    """Answers whether a staff member is already booked during an interval"""

    @staticmethod
    def has_conflict(
            db: Session,
            business_id: UUID,
            staff_id: Optional[UUID],
            buffered_start: datetime,
            buffered_end: datetime,
            exclude_appointment_id: Optional[UUID] = None,
            service_id: Optional[UUID] = None,
            allow_shared_slots: bool = False,
            start: Optional[datetime] = None,
            end: Optional[datetime] = None
    ) -> bool:
        """
        Half-open overlap of [buffered_start, buffered_end) against the staff
        member's active appointments as stored.

        When the unbuffered start/end are passed too, the existing appointments'
        own buffers are honoured as well: the new booking may not land inside
        another appointment's padding.

        With allow_shared_slots and a service_id, appointments of that same
        service do not count (MULTI services seat several clients per slot).
        Unassigned requests never conflict.
        """
        if not staff_id:
            return False

        exclude_service_id = service_id if allow_shared_slots and service_id else None

        conflict = AppointmentRepository.find_staff_overlap(
            db,
            business_id,
            staff_id,
            buffered_start,
            buffered_end,
            exclude_appointment_id=exclude_appointment_id,
            exclude_service_id=exclude_service_id,
        )

        if conflict is None and start is not None and end is not None:
            conflict = AppointmentRepository.find_staff_buffer_overlap(
                db,
                business_id,
                staff_id,
                start,
                end,
                exclude_appointment_id=exclude_appointment_id,
                exclude_service_id=exclude_service_id,
            )

        if conflict:
            logger.debug(
                f"Staff {staff_id} busy {buffered_start}-{buffered_end}: overlaps appointment {conflict.id}"
            )
        return conflict is not None

    @staticmethod
    def service_has_conflict(
            db: Session,
            business_id: UUID,
            staff_id: Optional[UUID],
            service: Service,
            start: datetime,
            end: Optional[datetime] = None,
            exclude_appointment_id: Optional[UUID] = None
    ) -> bool:
        """has_conflict with the buffers and slot sharing taken from the service"""
        computed_end = end or start + timedelta(minutes=service.duration_minutes)
        buffered_start, buffered_end = buffered_interval(service, start, computed_end)

        return ConflictDetector.has_conflict(
            db,
            business_id,
            staff_id,
            buffered_start,
            buffered_end,
            exclude_appointment_id=exclude_appointment_id,
            service_id=service.id,
            allow_shared_slots=service.is_multi_capacity,
            start=start,
            end=computed_end,
        )

    @staticmethod
    def ensure_no_conflicts(
            db: Session,
            business_id: UUID,
            staff_id: Optional[UUID],
            service: Service,
            start: datetime,
            end: Optional[datetime] = None,
            exclude_appointment_id: Optional[UUID] = None
    ) -> None:
        """Raise AppointmentConflict if the buffered booking overlaps the staff member's calendar"""
        if ConflictDetector.service_has_conflict(
            db, business_id, staff_id, service, start, end, exclude_appointment_id
        ):
            raise AppointmentConflict()
