"""Waitlist repository - per-occurrence queues"""

from typing import Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from bookly.core.constants import WaitlistStatus
from bookly.models import WaitlistEntry


class WaitlistRepository:
    """Repository for waitlist database operations"""

    @staticmethod
    def count_entries(db: Session, business_id: UUID, occurrence_id: UUID) -> int:
        """All entries ever appended for the occurrence, whatever their status"""
        return (
            db.query(func.count(WaitlistEntry.id))
            .filter(
                WaitlistEntry.business_id == business_id,
                WaitlistEntry.class_occurrence_id == occurrence_id,
            )
            .scalar()
            or 0
        )

    @staticmethod
    def list_entries(
        db: Session, business_id: UUID, occurrence_id: UUID, status: Optional[str] = None
    ) -> list[WaitlistEntry]:
        """Entries for the occurrence in queue order"""
        query = db.query(WaitlistEntry).filter(
            WaitlistEntry.business_id == business_id,
            WaitlistEntry.class_occurrence_id == occurrence_id,
        )
        if status:
            query = query.filter(WaitlistEntry.status == status)
        return query.order_by(WaitlistEntry.position.asc(), WaitlistEntry.id.asc()).all()

    @staticmethod
    def next_pending(db: Session, business_id: UUID, occurrence_id: UUID) -> Optional[WaitlistEntry]:
        """Lowest-position PENDING entry"""
        return (
            db.query(WaitlistEntry)
            .filter(
                WaitlistEntry.business_id == business_id,
                WaitlistEntry.class_occurrence_id == occurrence_id,
                WaitlistEntry.status == WaitlistStatus.PENDING.value,
            )
            .order_by(WaitlistEntry.position.asc(), WaitlistEntry.id.asc())
            .first()
        )

    @staticmethod
    def get_entry(db: Session, business_id: UUID, entry_id: UUID) -> Optional[WaitlistEntry]:
        """Get a waitlist entry by ID within the tenant"""
        return (
            db.query(WaitlistEntry)
            .filter(WaitlistEntry.id == entry_id, WaitlistEntry.business_id == business_id)
            .first()
        )

    @staticmethod
    def add_entry(db: Session, business_id: UUID, **entry_data) -> WaitlistEntry:
        """Stage a new entry; the caller owns the transaction"""
        entry = WaitlistEntry(business_id=business_id, **entry_data)
        db.add(entry)
        db.flush()
        return entry
