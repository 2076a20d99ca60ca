# ============================================================================
# FILE: bookly/api/v1/dashboard/scheduling.py
# Booking decisions and availability - thin HTTP layer
# ============================================================================
from fastapi import APIRouter, Depends, Query, Path
from sqlalchemy.orm import Session
from datetime import date
from uuid import UUID
import logging

from bookly.config.database import get_db
from bookly.api.dependencies import get_business_id
from bookly.core.exceptions import StaffNotFound
from bookly.repositories.availability_repository import AvailabilityRepository
from bookly.repositories.staff_repository import StaffRepository
from bookly.schemas.scheduling import (
    AvailabilityBlockCreate,
    AvailabilityBlockUpdate,
    AvailabilityWindowsResponse,
    CapacityCheckRequest,
    CapacityCheckResponse,
    ResolveBookingRequest,
    ResolveBookingResponse,
)
from bookly.services.availability.availability_service import AvailabilityService
from bookly.services.scheduling.booking_engine import BookingDecisionEngine
from bookly.services.scheduling.capacity_service import CapacityGuard

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/scheduling", tags=["dashboard-scheduling"])


@router.post("/resolve", response_model=ResolveBookingResponse)
def resolve_booking(
        payload: ResolveBookingRequest,
        business_id: UUID = Depends(get_business_id),
        db: Session = Depends(get_db)
):
    """
    Decide whether a booking is legal and which staff member takes it.
    Nothing is persisted.
    """
    service = BookingDecisionEngine.load_service(db, business_id, payload.service_id)
    decision = BookingDecisionEngine.resolve_booking(
        db,
        service,
        business_id,
        payload.start_time,
        preferred_staff_id=payload.preferred_staff_id
    )
    return ResolveBookingResponse(
        staff_id=decision.staff_id,
        start_time=decision.start,
        end_time=decision.end
    )


@router.post("/capacity", response_model=CapacityCheckResponse)
def check_capacity(
        payload: CapacityCheckRequest,
        business_id: UUID = Depends(get_business_id),
        db: Session = Depends(get_db)
):
    """Check that the slot still has a free seat"""
    CapacityGuard.ensure_capacity(
        db,
        business_id,
        payload.service_id,
        payload.start_time,
        payload.end_time,
        payload.max_clients_per_slot,
        exclude_appointment_id=payload.exclude_appointment_id
    )
    remaining = CapacityGuard.seats_remaining(
        db,
        business_id,
        payload.service_id,
        payload.start_time,
        payload.end_time,
        payload.max_clients_per_slot,
        exclude_appointment_id=payload.exclude_appointment_id
    )
    return CapacityCheckResponse(ok=True, seats_remaining=remaining)


@router.get("/staff/{staff_id}/availability", response_model=AvailabilityWindowsResponse)
def get_availability_windows(
        staff_id: UUID = Path(..., description="The staff member ID"),
        on_date: date = Query(..., alias="date", description="Date to resolve windows for"),
        business_id: UUID = Depends(get_business_id),
        db: Session = Depends(get_db)
):
    """Windows (minutes since midnight) the staff member works in on a date"""
    if not StaffRepository.get_staff(db, business_id, staff_id):
        raise StaffNotFound()

    windows = AvailabilityService.windows_for(db, business_id, staff_id, on_date)
    return AvailabilityWindowsResponse(
        staff_id=staff_id,
        date=on_date,
        windows=[window.to_dict() for window in windows]
    )


@router.post("/staff/{staff_id}/availability", status_code=201)
def create_availability_block(
        payload: AvailabilityBlockCreate,
        staff_id: UUID = Path(..., description="The staff member ID"),
        business_id: UUID = Depends(get_business_id),
        db: Session = Depends(get_db)
):
    """Add a weekly template row or a date override"""
    if not StaffRepository.get_staff(db, business_id, staff_id):
        raise StaffNotFound()

    block = AvailabilityRepository.create_block(db, business_id, staff_id, **payload.model_dump())
    logger.info(f"Created availability block {block.id} for staff {staff_id}")

    return {"availability": block.to_dict()}


@router.get("/staff/{staff_id}/availability/blocks")
def list_availability_blocks(
        staff_id: UUID = Path(..., description="The staff member ID"),
        business_id: UUID = Depends(get_business_id),
        db: Session = Depends(get_db)
):
    """Raw template and override rows of a staff member"""
    if not StaffRepository.get_staff(db, business_id, staff_id):
        raise StaffNotFound()

    blocks = AvailabilityRepository.list_blocks(db, business_id, staff_id)
    return {"availability": [block.to_dict() for block in blocks]}


@router.put("/availability/{block_id}")
def update_availability_block(
        payload: AvailabilityBlockUpdate,
        block_id: UUID = Path(..., description="The availability block ID"),
        business_id: UUID = Depends(get_business_id),
        db: Session = Depends(get_db)
):
    """Partially update a block; send date: null to turn an override into a template row"""
    block = AvailabilityService.update_block(db, business_id, block_id, **payload.model_dump(exclude_unset=True))
    return {"availability": block.to_dict()}


@router.delete("/availability/{block_id}", status_code=204)
def delete_availability_block(
        block_id: UUID = Path(..., description="The availability block ID"),
        business_id: UUID = Depends(get_business_id),
        db: Session = Depends(get_db)
):
    AvailabilityService.delete_block(db, business_id, block_id)
