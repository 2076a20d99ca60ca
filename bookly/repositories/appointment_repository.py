"""Appointment repository - active-interval queries and writes"""

from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session, Query

from bookly.core.constants import ACTIVE_APPOINTMENT_STATUSES, MAX_BUFFER_MINUTES
from bookly.models import Appointment, Service
from bookly.utils.time_utils import to_utc


class AppointmentRepository:
    """Repository for appointment database operations"""

    @staticmethod
    def _active_overlapping(
        db: Session,
        business_id: UUID,
        start: datetime,
        end: datetime,
        exclude_appointment_id: Optional[UUID] = None,
    ) -> Query:
        """Active appointments whose stored interval overlaps [start, end)"""
        query = db.query(Appointment).filter(
            Appointment.business_id == business_id,
            Appointment.status.in_(ACTIVE_APPOINTMENT_STATUSES),
            Appointment.start_time < end,
            Appointment.end_time > start,
        )
        if exclude_appointment_id:
            query = query.filter(Appointment.id != exclude_appointment_id)
        return query

    @staticmethod
    def find_staff_overlap(
        db: Session,
        business_id: UUID,
        staff_id: UUID,
        start: datetime,
        end: datetime,
        exclude_appointment_id: Optional[UUID] = None,
        exclude_service_id: Optional[UUID] = None,
    ) -> Optional[Appointment]:
        """First active appointment of the staff member overlapping [start, end)"""
        query = AppointmentRepository._active_overlapping(
            db, business_id, start, end, exclude_appointment_id
        ).filter(Appointment.staff_id == staff_id)

        if exclude_service_id:
            query = query.filter(Appointment.service_id != exclude_service_id)

        return query.order_by(Appointment.start_time.asc()).first()

    @staticmethod
    def find_staff_buffer_overlap(
        db: Session,
        business_id: UUID,
        staff_id: UUID,
        start: datetime,
        end: datetime,
        exclude_appointment_id: Optional[UUID] = None,
        exclude_service_id: Optional[UUID] = None,
    ) -> Optional[Appointment]:
        """
        First active appointment of the staff member whose own buffered interval
        (its service's buffers applied) overlaps [start, end).
        """
        lookback = timedelta(minutes=MAX_BUFFER_MINUTES)
        query = (
            AppointmentRepository._active_overlapping(
                db, business_id, start - lookback, end + lookback, exclude_appointment_id
            )
            .join(Service, Service.id == Appointment.service_id)
            .filter(Appointment.staff_id == staff_id)
            .add_columns(Service.buffer_before_minutes, Service.buffer_after_minutes)
        )

        if exclude_service_id:
            query = query.filter(Appointment.service_id != exclude_service_id)

        # Stored values come back naive on SQLite and aware on Postgres
        start, end = to_utc(start), to_utc(end)
        for appointment, buffer_before, buffer_after in query.order_by(Appointment.start_time.asc()):
            padded_start = to_utc(appointment.start_time) - timedelta(minutes=buffer_before or 0)
            padded_end = to_utc(appointment.end_time) + timedelta(minutes=buffer_after or 0)
            if padded_start < end and padded_end > start:
                return appointment
        return None

    @staticmethod
    def count_service_overlaps(
        db: Session,
        business_id: UUID,
        service_id: UUID,
        start: datetime,
        end: datetime,
        exclude_appointment_id: Optional[UUID] = None,
    ) -> int:
        """Number of active appointments of the service overlapping [start, end)"""
        query = AppointmentRepository._active_overlapping(
            db, business_id, start, end, exclude_appointment_id
        ).filter(Appointment.service_id == service_id)

        return query.with_entities(func.count(Appointment.id)).scalar() or 0

    @staticmethod
    def get_appointment(
        db: Session, business_id: UUID, appointment_id: UUID, lock: bool = False
    ) -> Optional[Appointment]:
        """Get a specific appointment by ID"""
        query = db.query(Appointment).filter(
            Appointment.id == appointment_id,
            Appointment.business_id == business_id,
        )
        if lock:
            query = query.with_for_update()
        return query.first()

    @staticmethod
    def add_appointment(db: Session, business_id: UUID, **appointment_data) -> Appointment:
        """Stage a new appointment; the caller owns the transaction"""
        appointment = Appointment(business_id=business_id, **appointment_data)
        db.add(appointment)
        db.flush()
        return appointment

    @staticmethod
    def update_appointment(db: Session, appointment: Appointment, **updates) -> Appointment:
        """Stage field updates on an appointment; the caller owns the transaction"""
        for key, value in updates.items():
            if hasattr(appointment, key):
                setattr(appointment, key, value)
        db.flush()
        return appointment

    @staticmethod
    def list_appointments(
        db: Session,
        business_id: UUID,
        range_start: Optional[datetime] = None,
        range_end: Optional[datetime] = None,
        staff_id: Optional[UUID] = None,
        status: Optional[str] = None,
    ) -> list[Appointment]:
        """Appointments starting at or after range_start and ending by range_end, earliest first"""
        query = db.query(Appointment).filter(Appointment.business_id == business_id)
        if range_start:
            query = query.filter(Appointment.start_time >= range_start)
        if range_end:
            query = query.filter(Appointment.end_time <= range_end)
        if staff_id:
            query = query.filter(Appointment.staff_id == staff_id)
        if status:
            query = query.filter(Appointment.status == status)
        return query.order_by(Appointment.start_time.asc()).all()
