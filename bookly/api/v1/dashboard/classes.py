# ============================================================================
# FILE: bookly/api/v1/dashboard/classes.py
# Class templates and occurrences - thin HTTP layer
# ============================================================================
from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session
from datetime import datetime
from typing import Optional
from uuid import UUID

from bookly.config.database import get_db
from bookly.api.dependencies import get_business_id
from bookly.schemas.scheduling import ClassTemplateCreate, ClassTemplateUpdate, OccurrenceCreate
from bookly.utils.time_utils import to_utc
from bookly.services.classes.class_scheduler import ClassScheduler

router = APIRouter(prefix="/classes", tags=["dashboard-classes"])


@router.get("/templates")
def list_templates(
        include_inactive: bool = Query(False),
        business_id: UUID = Depends(get_business_id),
        db: Session = Depends(get_db)
):
    templates = ClassScheduler.list_templates(db, business_id, include_inactive=include_inactive)
    return {"templates": [template.to_dict() for template in templates]}


@router.post("/templates", status_code=201)
def create_template(
        payload: ClassTemplateCreate,
        business_id: UUID = Depends(get_business_id),
        db: Session = Depends(get_db)
):
    """Define a class; occurrences are generated from it one at a time"""
    template = ClassScheduler.create_template(db, business_id, **payload.model_dump())
    return {"template": template.to_dict()}


@router.put("/templates/{template_id}")
def update_template(
        payload: ClassTemplateUpdate,
        template_id: UUID = Path(..., description="The class template ID"),
        business_id: UUID = Depends(get_business_id),
        db: Session = Depends(get_db)
):
    """Update a template; is_active=false stops new occurrences being generated"""
    template = ClassScheduler.update_template(
        db, business_id, template_id, **payload.model_dump(exclude_none=True)
    )
    return {"template": template.to_dict()}


@router.get("/occurrences")
def list_occurrences(
        range_start: Optional[datetime] = Query(None, description="Defaults to 24 hours ago"),
        range_end: Optional[datetime] = Query(None),
        limit: int = Query(50, ge=1, le=200),
        business_id: UUID = Depends(get_business_id),
        db: Session = Depends(get_db)
):
    """Upcoming occurrences, earliest first"""
    occurrences = ClassScheduler.list_occurrences(
        db,
        business_id,
        range_start=to_utc(range_start) if range_start else None,
        range_end=to_utc(range_end) if range_end else None,
        limit=limit
    )
    return {"occurrences": [occurrence.to_dict() for occurrence in occurrences]}


@router.post("/occurrences", status_code=201)
def create_occurrence(
        payload: OccurrenceCreate,
        business_id: UUID = Depends(get_business_id),
        db: Session = Depends(get_db)
):
    """Create one bookable occurrence of a class template"""
    occurrence = ClassScheduler.generate_occurrence(
        db,
        payload.template_id,
        business_id,
        payload.start_time,
        instructor_id=payload.instructor_id,
        capacity_override=payload.capacity,
        timezone=payload.timezone
    )
    return {"occurrence": occurrence.to_dict()}


@router.post("/occurrences/{occurrence_id}/book")
def book_seat(
        occurrence_id: UUID = Path(..., description="The class occurrence ID"),
        business_id: UUID = Depends(get_business_id),
        db: Session = Depends(get_db)
):
    """Take one seat in the class"""
    occurrence = ClassScheduler.book_seat(db, business_id, occurrence_id)
    return {"occurrence": occurrence.to_dict()}


@router.post("/occurrences/{occurrence_id}/release")
def release_seat(
        occurrence_id: UUID = Path(..., description="The class occurrence ID"),
        business_id: UUID = Depends(get_business_id),
        db: Session = Depends(get_db)
):
    """Give one seat back"""
    occurrence = ClassScheduler.release_seat(db, business_id, occurrence_id)
    return {"occurrence": occurrence.to_dict()}
