# ============================================================================
# FILE: bookly/api/v1/dashboard/waitlist.py
# Class waitlists - thin HTTP layer
# IMPORTANT: /entry/... routes MUST come before /{occurrence_id} routes
# ============================================================================
from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session
from typing import Optional
from uuid import UUID

from bookly.config.database import get_db
from bookly.api.dependencies import get_business_id
from bookly.core.constants import WaitlistStatus
from bookly.schemas.scheduling import WaitlistJoinRequest
from bookly.services.waitlist.waitlist_service import WaitlistService

router = APIRouter(prefix="/waitlist", tags=["dashboard-waitlist"])


@router.delete("/entry/{entry_id}")
def remove_waitlist_entry(
        entry_id: UUID = Path(..., description="The waitlist entry ID"),
        business_id: UUID = Depends(get_business_id),
        db: Session = Depends(get_db)
):
    """Take an entry off the waitlist; its position is not reused"""
    entry = WaitlistService.remove_entry(db, business_id, entry_id)
    return {"entry": entry.to_dict()}


@router.get("/{occurrence_id}")
def list_waitlist(
        occurrence_id: UUID = Path(..., description="The class occurrence ID"),
        status: Optional[WaitlistStatus] = Query(None, description="Filter by entry status"),
        business_id: UUID = Depends(get_business_id),
        db: Session = Depends(get_db)
):
    """Waitlist entries in queue order"""
    entries = WaitlistService.list_entries(
        db, business_id, occurrence_id, status=status.value if status else None
    )
    return {"entries": [entry.to_dict() for entry in entries]}


@router.post("/{occurrence_id}", status_code=201)
def join_waitlist(
        payload: WaitlistJoinRequest,
        occurrence_id: UUID = Path(..., description="The class occurrence ID"),
        business_id: UUID = Depends(get_business_id),
        db: Session = Depends(get_db)
):
    """Append a customer to the waitlist"""
    entry = WaitlistService.join(db, business_id, occurrence_id, payload.customer_id)
    return {"entry": entry.to_dict()}


@router.post("/{occurrence_id}/promote")
def promote_waitlist(
        occurrence_id: UUID = Path(..., description="The class occurrence ID"),
        business_id: UUID = Depends(get_business_id),
        db: Session = Depends(get_db)
):
    """Promote the next pending entry once a seat is free"""
    entry = WaitlistService.promote_next(db, business_id, occurrence_id)
    return {"promoted": entry.to_dict()}
