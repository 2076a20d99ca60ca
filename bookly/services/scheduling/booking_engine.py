# ===== bookly/services/scheduling/booking_engine.py =====
"""
Booking decision gate used by every booking flow (internal, public, client portal).
Accepts or rejects a proposed appointment; never writes.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID
import logging

from sqlalchemy.orm import Session

from bookly.core.exceptions import ServiceNotFound
from bookly.models.service import Service
from bookly.repositories.service_repository import ServiceRepository
from bookly.services.scheduling.capacity_service import CapacityGuard
from bookly.services.scheduling.staff_resolver import StaffResolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BookingDecision:
    """An accepted booking: the caller may persist it as PENDING/CONFIRMED"""
    staff_id: Optional[UUID]
    start: datetime
    end: datetime

    def to_dict(self):
        return {
            "staff_id": str(self.staff_id) if self.staff_id else None,
            "start_time": self.start.isoformat(),
            "end_time": self.end.isoformat(),
        }


class BookingDecisionEngine:
    """Combines CapacityGuard and StaffResolver into a single accept/reject"""

    @staticmethod
    def load_service(db: Session, business_id: UUID, service_id: UUID, lock: bool = False) -> Service:
        service = ServiceRepository.get_service(db, business_id, service_id, lock=lock)
        if not service:
            raise ServiceNotFound()
        return service

    @staticmethod
    def resolve_booking(
            db: Session,
            service: Service,
            business_id: UUID,
            requested_start: datetime,
            preferred_staff_id: Optional[UUID] = None,
            exclude_appointment_id: Optional[UUID] = None
    ) -> BookingDecision:
        """
        Decide a booking of service at requested_start.

        MULTI services check seats before touching staff logic. SINGLE services
        rely on staff exclusivity, except when the booking ends up unassigned:
        then nothing else stops a second client, so the single seat is counted.
        """
        end = requested_start + timedelta(minutes=service.duration_minutes)

        if service.is_multi_capacity:
            CapacityGuard.ensure_capacity(
                db,
                business_id,
                service.id,
                requested_start,
                end,
                service.max_clients_per_slot,
                exclude_appointment_id=exclude_appointment_id,
            )

        staff_id = StaffResolver.resolve(
            db,
            service,
            business_id,
            requested_start,
            end,
            preferred_staff_id=preferred_staff_id,
            exclude_appointment_id=exclude_appointment_id,
        )

        if staff_id is None and not service.is_multi_capacity:
            CapacityGuard.ensure_capacity(
                db,
                business_id,
                service.id,
                requested_start,
                end,
                service.max_clients_per_slot,
                exclude_appointment_id=exclude_appointment_id,
            )

        logger.debug(f"Booking of service {service.id} at {requested_start} accepted for staff {staff_id}")
        return BookingDecision(staff_id=staff_id, start=requested_start, end=end)
