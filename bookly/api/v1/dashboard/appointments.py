# ============================================================================
# FILE: bookly/api/v1/dashboard/appointments.py
# Appointments - thin HTTP layer
# ============================================================================
from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session
from datetime import datetime
from typing import Optional
from uuid import UUID

from bookly.config.database import get_db
from bookly.api.dependencies import get_business_id
from bookly.schemas.scheduling import (
    AppointmentCancel,
    AppointmentCreate,
    AppointmentReschedule,
    AppointmentStatusUpdate,
)
from bookly.core.constants import AppointmentStatus
from bookly.repositories.appointment_repository import AppointmentRepository
from bookly.services.appointment.appointment_service import AppointmentService
from bookly.utils.time_utils import to_utc

router = APIRouter(prefix="/appointments", tags=["dashboard-appointments"])


@router.get("")
def list_appointments(
        range_start: Optional[datetime] = Query(None, description="Earliest start time"),
        range_end: Optional[datetime] = Query(None, description="Latest end time"),
        staff_id: Optional[UUID] = Query(None),
        status: Optional[AppointmentStatus] = Query(None),
        business_id: UUID = Depends(get_business_id),
        db: Session = Depends(get_db)
):
    """Appointments of the business, earliest first"""
    appointments = AppointmentRepository.list_appointments(
        db,
        business_id,
        range_start=to_utc(range_start) if range_start else None,
        range_end=to_utc(range_end) if range_end else None,
        staff_id=staff_id,
        status=status.value if status else None
    )
    return {"total": len(appointments), "appointments": [appointment.to_dict() for appointment in appointments]}


@router.post("", status_code=201)
def create_appointment(
        payload: AppointmentCreate,
        business_id: UUID = Depends(get_business_id),
        db: Session = Depends(get_db)
):
    """
    Book an appointment. The staff member is picked automatically
    when none is requested.
    """
    appointment = AppointmentService.book_appointment(
        db,
        business_id,
        payload.service_id,
        payload.start_time,
        preferred_staff_id=payload.staff_id,
        customer_id=payload.customer_id,
        source=payload.source.value,
        status=payload.status.value,
        notes=payload.notes,
        customer_notes=payload.customer_notes
    )
    return {"appointment": appointment.to_dict()}


@router.put("/{appointment_id}")
def reschedule_appointment(
        payload: AppointmentReschedule,
        appointment_id: UUID = Path(..., description="The appointment ID"),
        business_id: UUID = Depends(get_business_id),
        db: Session = Depends(get_db)
):
    """Move an appointment to a new start time"""
    appointment = AppointmentService.reschedule_appointment(
        db,
        business_id,
        appointment_id,
        payload.start_time,
        preferred_staff_id=payload.staff_id
    )
    return {"appointment": appointment.to_dict()}


@router.put("/{appointment_id}/status")
def update_appointment_status(
        payload: AppointmentStatusUpdate,
        appointment_id: UUID = Path(..., description="The appointment ID"),
        business_id: UUID = Depends(get_business_id),
        db: Session = Depends(get_db)
):
    """Change an appointment's status"""
    appointment = AppointmentService.update_status(db, business_id, appointment_id, payload.status.value)
    return {"appointment": appointment.to_dict()}


@router.post("/{appointment_id}/cancel")
def cancel_appointment(
        payload: AppointmentCancel,
        appointment_id: UUID = Path(..., description="The appointment ID"),
        business_id: UUID = Depends(get_business_id),
        db: Session = Depends(get_db)
):
    """Cancel an appointment and free its slot"""
    appointment = AppointmentService.cancel_appointment(db, business_id, appointment_id, reason=payload.reason)
    return {"appointment": appointment.to_dict()}
