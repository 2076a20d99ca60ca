# ============================================================================
# bookly/services/appointment/appointment_service.py
# ============================================================================
"""
Service for accepting, moving and cancelling appointments.

The decision engine is a fast-path filter. The authoritative check happens
here, inside the write transaction: the contended rows are locked, the same
conflict and seat predicates are evaluated again, and only then is the
appointment flushed and committed.
"""
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bookly.config.settings import get_settings
from bookly.core.constants import AppointmentSource, AppointmentStatus, ACTIVE_APPOINTMENT_STATUSES
from bookly.core.exceptions import (
    AppointmentNotFound,
    CustomerNotFound,
    SchedulingError,
    SlotUnavailable,
)
from bookly.models.appointment import Appointment
from bookly.models.service import Service
from bookly.repositories.appointment_repository import AppointmentRepository
from bookly.repositories.customer_repository import CustomerRepository
from bookly.repositories.service_repository import ServiceRepository
from bookly.repositories.staff_repository import StaffRepository
from bookly.services.scheduling.booking_engine import BookingDecision, BookingDecisionEngine
from bookly.services.scheduling.capacity_service import CapacityGuard
from bookly.services.scheduling.conflict_service import ConflictDetector
from bookly.services.scheduling.staff_resolver import StaffResolver

logger = logging.getLogger(__name__)
settings = get_settings()


class AppointmentService:
    """Handles appointment writes"""

    @staticmethod
    def book_appointment(
            db: Session,
            business_id: UUID,
            service_id: UUID,
            start: datetime,
            preferred_staff_id: Optional[UUID] = None,
            customer_id: Optional[UUID] = None,
            source: str = AppointmentSource.INTERNAL.value,
            status: str = AppointmentStatus.PENDING.value,
            notes: Optional[str] = None,
            customer_notes: Optional[str] = None
    ) -> Appointment:
        """Decide, re-check under lock, and persist a new appointment"""
        if status not in ACTIVE_APPOINTMENT_STATUSES:
            raise SchedulingError("New appointments must be PENDING or CONFIRMED.")

        if customer_id and not CustomerRepository.get_customer(db, business_id, customer_id):
            raise CustomerNotFound()

        service = BookingDecisionEngine.load_service(db, business_id, service_id)
        decision = BookingDecisionEngine.resolve_booking(
            db, service, business_id, start, preferred_staff_id=preferred_staff_id
        )

        try:
            AppointmentService._lock_and_recheck(db, business_id, service, decision)
            appointment = AppointmentRepository.add_appointment(
                db,
                business_id,
                service_id=service.id,
                staff_id=decision.staff_id,
                customer_id=customer_id,
                start_time=decision.start,
                end_time=decision.end,
                status=status,
                source=source,
                notes=notes,
                customer_notes=customer_notes,
            )
            db.commit()
        except IntegrityError as e:
            db.rollback()
            logger.warning(f"Appointment insert rejected by the store: {e}")
            raise SlotUnavailable()
        except SchedulingError:
            db.rollback()
            raise

        db.refresh(appointment)
        logger.info(
            f"Booked appointment {appointment.id}: service {service.id}, staff {decision.staff_id}, "
            f"{decision.start}-{decision.end}"
        )
        return appointment

    @staticmethod
    def reschedule_appointment(
            db: Session,
            business_id: UUID,
            appointment_id: UUID,
            new_start: datetime,
            preferred_staff_id: Optional[UUID] = None
    ) -> Appointment:
        """Move an active appointment; its own seat and staff time do not block the move"""
        appointment = AppointmentService._get_or_raise(db, business_id, appointment_id)

        if not appointment.is_active:
            raise SchedulingError("Only pending or confirmed appointments can be rescheduled.")

        service = BookingDecisionEngine.load_service(db, business_id, appointment.service_id)
        decision = BookingDecisionEngine.resolve_booking(
            db,
            service,
            business_id,
            new_start,
            preferred_staff_id=preferred_staff_id,
            exclude_appointment_id=appointment.id,
        )

        try:
            AppointmentService._lock_and_recheck(db, business_id, service, decision, appointment.id)
            AppointmentRepository.update_appointment(
                db,
                appointment,
                staff_id=decision.staff_id,
                start_time=decision.start,
                end_time=decision.end,
            )
            db.commit()
        except SchedulingError:
            db.rollback()
            raise

        db.refresh(appointment)
        logger.info(f"Rescheduled appointment {appointment.id} to {decision.start}-{decision.end}")
        return appointment

    @staticmethod
    def cancel_appointment(
            db: Session,
            business_id: UUID,
            appointment_id: UUID,
            reason: Optional[str] = None
    ) -> Appointment:
        """Cancel an appointment, freeing its staff time and seat"""
        appointment = AppointmentService._get_or_raise(db, business_id, appointment_id)

        if appointment.status == AppointmentStatus.CANCELLED.value:
            return appointment

        AppointmentRepository.update_appointment(
            db,
            appointment,
            status=AppointmentStatus.CANCELLED.value,
            cancelled_at=datetime.now(timezone.utc),
            cancellation_reason=reason,
        )
        db.commit()
        db.refresh(appointment)

        logger.info(f"Cancelled appointment {appointment.id}")
        return appointment

    @staticmethod
    def update_status(
            db: Session,
            business_id: UUID,
            appointment_id: UUID,
            status: str
    ) -> Appointment:
        """Change status; reactivating an inactive appointment re-validates its slot"""
        if status == AppointmentStatus.CANCELLED.value:
            return AppointmentService.cancel_appointment(db, business_id, appointment_id)

        appointment = AppointmentService._get_or_raise(db, business_id, appointment_id)

        try:
            if status in ACTIVE_APPOINTMENT_STATUSES and not appointment.is_active:
                service = BookingDecisionEngine.load_service(db, business_id, appointment.service_id)
                if appointment.staff_id:
                    # The staff member must still be eligible and free for the slot
                    StaffResolver.resolve(
                        db,
                        service,
                        business_id,
                        appointment.start_time,
                        appointment.end_time,
                        preferred_staff_id=appointment.staff_id,
                        exclude_appointment_id=appointment.id,
                    )
                decision = BookingDecision(
                    staff_id=appointment.staff_id,
                    start=appointment.start_time,
                    end=appointment.end_time,
                )
                AppointmentService._lock_and_recheck(db, business_id, service, decision, appointment.id)

            AppointmentRepository.update_appointment(db, appointment, status=status)
            db.commit()
        except SchedulingError:
            db.rollback()
            raise

        db.refresh(appointment)
        logger.info(f"Appointment {appointment.id} status -> {status}")
        return appointment

    @staticmethod
    def _get_or_raise(db: Session, business_id: UUID, appointment_id: UUID) -> Appointment:
        appointment = AppointmentRepository.get_appointment(db, business_id, appointment_id)
        if not appointment:
            raise AppointmentNotFound()
        return appointment

    @staticmethod
    def _lock_and_recheck(
            db: Session,
            business_id: UUID,
            service: Service,
            decision: BookingDecision,
            exclude_appointment_id: Optional[UUID] = None
    ) -> None:
        """
        Serialize writers on the contended rows, then re-run the predicates.
        Staff-bound bookings lock the staff row; seat-counted bookings lock the
        service row. Locks are held until the caller commits or rolls back.
        """
        counts_seats = service.is_multi_capacity or decision.staff_id is None

        if settings.BOOKING_ROW_LOCKS:
            if decision.staff_id:
                StaffRepository.get_staff(db, business_id, decision.staff_id, lock=True)
            if counts_seats:
                ServiceRepository.get_service(db, business_id, service.id, lock=True)

        if ConflictDetector.service_has_conflict(
            db,
            business_id,
            decision.staff_id,
            service,
            decision.start,
            decision.end,
            exclude_appointment_id=exclude_appointment_id,
        ):
            raise SlotUnavailable()

        if counts_seats and CapacityGuard.seats_remaining(
            db,
            business_id,
            service.id,
            decision.start,
            decision.end,
            service.max_clients_per_slot,
            exclude_appointment_id=exclude_appointment_id,
        ) == 0:
            raise SlotUnavailable()
