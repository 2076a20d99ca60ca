# ===== bookly/services/waitlist/waitlist_service.py =====
"""Per-occurrence waitlists for full classes"""
from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bookly.config.settings import get_settings
from bookly.core.constants import WaitlistStatus
from bookly.core.exceptions import (
    ClassOccurrenceNotFound,
    ClassStillFull,
    ConflictError,
    CustomerNotFound,
    NoWaitlistEntries,
    WaitlistEntryNotFound,
)
from bookly.models.class_schedule import ClassOccurrence
from bookly.models.waitlist import WaitlistEntry
from bookly.repositories.class_repository import ClassRepository
from bookly.repositories.customer_repository import CustomerRepository
from bookly.repositories.waitlist_repository import WaitlistRepository

logger = logging.getLogger(__name__)
settings = get_settings()


class WaitlistService:
    """
    Ordered queue per class occurrence.

    Positions are an append log: a new entry gets count(all entries) + 1 and
    entries are never deleted, only marked REMOVED, so a position is never reused.
    Promotion only marks eligibility; turning a PROMOTED entry into a booked
    seat is a separate step the customer confirms.
    """

    @staticmethod
    def _load_occurrence(db: Session, business_id: UUID, occurrence_id: UUID) -> ClassOccurrence:
        occurrence = ClassRepository.get_occurrence(
            db, business_id, occurrence_id, lock=settings.BOOKING_ROW_LOCKS
        )
        if not occurrence:
            raise ClassOccurrenceNotFound()
        return occurrence

    @staticmethod
    def list_entries(
            db: Session,
            business_id: UUID,
            occurrence_id: UUID,
            status: Optional[str] = None
    ) -> List[WaitlistEntry]:
        """Entries in queue order, optionally filtered by status"""
        if not ClassRepository.get_occurrence(db, business_id, occurrence_id):
            raise ClassOccurrenceNotFound()
        return WaitlistRepository.list_entries(db, business_id, occurrence_id, status=status)

    @staticmethod
    def join(
            db: Session,
            business_id: UUID,
            occurrence_id: UUID,
            customer_id: UUID
    ) -> WaitlistEntry:
        """Append a customer to the occurrence's queue"""
        occurrence = WaitlistService._load_occurrence(db, business_id, occurrence_id)

        if not CustomerRepository.get_customer(db, business_id, customer_id):
            raise CustomerNotFound()

        position = WaitlistRepository.count_entries(db, business_id, occurrence_id) + 1

        try:
            entry = WaitlistRepository.add_entry(
                db,
                business_id,
                class_occurrence_id=occurrence.id,
                customer_id=customer_id,
                position=position,
                status=WaitlistStatus.PENDING.value,
            )
            occurrence.waitlist_count = (occurrence.waitlist_count or 0) + 1
            db.commit()
        except IntegrityError:
            db.rollback()
            logger.warning(f"Waitlist position {position} for occurrence {occurrence_id} taken concurrently")
            raise ConflictError("Waitlist changed while joining. Please try again.")

        db.refresh(entry)
        logger.info(f"Customer {customer_id} joined waitlist of {occurrence_id} at position {position}")
        return entry

    @staticmethod
    def promote_next(
            db: Session,
            business_id: UUID,
            occurrence_id: UUID
    ) -> WaitlistEntry:
        """
        Mark the oldest PENDING entry PROMOTED once a seat is free.
        The caller notifies the customer; nothing is booked here.
        """
        occurrence = WaitlistService._load_occurrence(db, business_id, occurrence_id)

        if occurrence.booked_count >= occurrence.capacity:
            db.rollback()
            raise ClassStillFull()

        entry = WaitlistRepository.next_pending(db, business_id, occurrence_id)
        if not entry:
            db.rollback()
            raise NoWaitlistEntries()

        entry.status = WaitlistStatus.PROMOTED.value
        entry.promoted_at = datetime.now(timezone.utc)
        occurrence.waitlist_count = max((occurrence.waitlist_count or 0) - 1, 0)
        db.commit()
        db.refresh(entry)

        logger.info(f"Promoted waitlist entry {entry.id} (position {entry.position}) for occurrence {occurrence_id}")
        return entry

    @staticmethod
    def remove_entry(db: Session, business_id: UUID, entry_id: UUID) -> WaitlistEntry:
        """Take an entry out of the queue without freeing its position"""
        entry = WaitlistRepository.get_entry(db, business_id, entry_id)
        if not entry:
            raise WaitlistEntryNotFound()

        if entry.status == WaitlistStatus.PENDING.value:
            occurrence = WaitlistService._load_occurrence(db, business_id, entry.class_occurrence_id)
            occurrence.waitlist_count = max((occurrence.waitlist_count or 0) - 1, 0)

        if entry.status != WaitlistStatus.REMOVED.value:
            entry.status = WaitlistStatus.REMOVED.value
            entry.removed_at = datetime.now(timezone.utc)
            db.commit()
            db.refresh(entry)
            logger.info(f"Removed waitlist entry {entry.id} (position {entry.position})")

        return entry
