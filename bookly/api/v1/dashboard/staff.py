# ============================================================================
# FILE: bookly/api/v1/dashboard/staff.py
# Staff roster - thin HTTP layer
# ============================================================================
from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session
from uuid import UUID

from bookly.config.database import get_db
from bookly.api.dependencies import get_business_id
from bookly.schemas.scheduling import StaffCreate, StaffUpdate
from bookly.services.catalog.catalog_service import CatalogService

router = APIRouter(prefix="/staff", tags=["dashboard-staff"])


@router.get("")
def list_staff(
        business_id: UUID = Depends(get_business_id),
        db: Session = Depends(get_db)
):
    staff = CatalogService.list_staff(db, business_id)
    return {"staff": [member.to_dict() for member in staff]}


@router.post("", status_code=201)
def create_staff(
        payload: StaffCreate,
        business_id: UUID = Depends(get_business_id),
        db: Session = Depends(get_db)
):
    staff = CatalogService.create_staff(db, business_id, **payload.model_dump())
    return {"staff": staff.to_dict()}


@router.put("/{staff_id}")
def update_staff(
        payload: StaffUpdate,
        staff_id: UUID = Path(..., description="The staff member ID"),
        business_id: UUID = Depends(get_business_id),
        db: Session = Depends(get_db)
):
    """Update a staff member; is_active=false takes them out of resolution"""
    staff = CatalogService.update_staff(db, business_id, staff_id, **payload.model_dump(exclude_none=True))
    return {"staff": staff.to_dict()}

