# ===== bookly/services/scheduling/capacity_service.py =====
"""Seat accounting for services"""
from datetime import datetime
from typing import Optional
from uuid import UUID
import logging

from sqlalchemy.orm import Session

from bookly.core.exceptions import InvalidCapacityConfiguration, SeatsExhausted
from bookly.repositories.appointment_repository import AppointmentRepository

logger = logging.getLogger(__name__)


class CapacityGuard:
    """
    Counts concurrently active bookings of a service against its seat limit.
    Uses the exact interval: buffers govern staff exclusivity, not seats.
    This is count-then-decide; the booking transaction re-runs it under a lock.
    """

    @staticmethod
    def seats_remaining(
            db: Session,
            business_id: UUID,
            service_id: UUID,
            start: datetime,
            end: datetime,
            max_clients_per_slot: int,
            exclude_appointment_id: Optional[UUID] = None
    ) -> int:
        """Free seats for [start, end); never negative"""
        if max_clients_per_slot <= 0:
            raise InvalidCapacityConfiguration()

        taken = AppointmentRepository.count_service_overlaps(
            db, business_id, service_id, start, end, exclude_appointment_id
        )
        return max(max_clients_per_slot - taken, 0)

    @staticmethod
    def ensure_capacity(
            db: Session,
            business_id: UUID,
            service_id: UUID,
            start: datetime,
            end: datetime,
            max_clients_per_slot: int,
            exclude_appointment_id: Optional[UUID] = None
    ) -> None:
        """Raise SeatsExhausted if the slot already holds max_clients_per_slot active bookings"""
        remaining = CapacityGuard.seats_remaining(
            db, business_id, service_id, start, end, max_clients_per_slot, exclude_appointment_id
        )

        if remaining == 0:
            logger.debug(f"Service {service_id} full for {start}-{end} ({max_clients_per_slot} seats)")
            raise SeatsExhausted()
