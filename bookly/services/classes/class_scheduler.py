# ===== bookly/services/classes/class_scheduler.py =====
"""
Class templates and the bookable occurrences materialized from them.
One occurrence per call; recurrence rules are not expanded here.
"""
from datetime import datetime, timedelta, timezone as dt_timezone
from typing import List, Optional
from uuid import UUID
import logging

from sqlalchemy.orm import Session

from bookly.config.settings import get_settings
from bookly.core.constants import OccurrenceStatus
from bookly.core.exceptions import (
    ClassOccurrenceNotFound,
    ClassStillFull,
    ClassTemplateNotFound,
    InvalidCapacityConfiguration,
    StaffNotFound,
)
from bookly.models.class_schedule import ClassOccurrence, ClassTemplate
from bookly.repositories.class_repository import ClassRepository
from bookly.repositories.staff_repository import StaffRepository

logger = logging.getLogger(__name__)
settings = get_settings()


class ClassScheduler:
    """Creates occurrences and keeps their seat counters in range"""

    @staticmethod
    def generate_occurrence(
            db: Session,
            template_id: UUID,
            business_id: UUID,
            start: datetime,
            instructor_id: Optional[UUID] = None,
            capacity_override: Optional[int] = None,
            timezone: Optional[str] = None
    ) -> ClassOccurrence:
        """Create exactly one SCHEDULED occurrence of the template starting at start"""
        template = ClassRepository.get_template(db, business_id, template_id)
        if not template or not template.is_active:
            raise ClassTemplateNotFound()

        capacity = capacity_override if capacity_override is not None else template.default_capacity
        if capacity <= 0:
            raise InvalidCapacityConfiguration("Class capacity must be at least 1 seat.")

        if instructor_id and not StaffRepository.get_staff(db, business_id, instructor_id):
            raise StaffNotFound()

        occurrence = ClassRepository.create_occurrence(
            db,
            business_id,
            template_id=template.id,
            instructor_id=instructor_id or template.default_instructor_id,
            start_time=start,
            end_time=start + timedelta(minutes=template.duration_minutes),
            timezone=timezone or settings.DEFAULT_TIMEZONE,
            capacity=capacity,
            booked_count=0,
            waitlist_count=0,
            status=OccurrenceStatus.SCHEDULED.value,
        )

        logger.info(f"Generated occurrence {occurrence.id} of template {template.id} at {start}")
        return occurrence

    @staticmethod
    def book_seat(db: Session, business_id: UUID, occurrence_id: UUID) -> ClassOccurrence:
        """Take one seat; raises ClassStillFull at capacity"""
        occurrence = ClassRepository.get_occurrence(
            db, business_id, occurrence_id, lock=settings.BOOKING_ROW_LOCKS
        )
        if not occurrence or occurrence.status != OccurrenceStatus.SCHEDULED.value:
            raise ClassOccurrenceNotFound()

        if occurrence.booked_count >= occurrence.capacity:
            db.rollback()
            raise ClassStillFull()

        occurrence.booked_count += 1
        db.commit()
        db.refresh(occurrence)
        return occurrence

    @staticmethod
    def release_seat(db: Session, business_id: UUID, occurrence_id: UUID) -> ClassOccurrence:
        """Give one seat back; the count never drops below zero"""
        occurrence = ClassRepository.get_occurrence(
            db, business_id, occurrence_id, lock=settings.BOOKING_ROW_LOCKS
        )
        if not occurrence:
            raise ClassOccurrenceNotFound()

        occurrence.booked_count = max(occurrence.booked_count - 1, 0)
        db.commit()
        db.refresh(occurrence)
        return occurrence

    @staticmethod
    def list_occurrences(
            db: Session,
            business_id: UUID,
            range_start: Optional[datetime] = None,
            range_end: Optional[datetime] = None,
            limit: int = 50
    ) -> List[ClassOccurrence]:
        """Upcoming occurrences; without range_start, from 24 hours ago"""
        if range_start is None:
            range_start = datetime.now(dt_timezone.utc) - timedelta(hours=24)
        return ClassRepository.list_occurrences(db, business_id, range_start, range_end, limit=limit)

    # ------------------------------------------------------------------------
    # Templates
    # ------------------------------------------------------------------------

    @staticmethod
    def list_templates(db: Session, business_id: UUID, include_inactive: bool = False) -> List[ClassTemplate]:
        return ClassRepository.list_templates(db, business_id, include_inactive=include_inactive)

    @staticmethod
    def create_template(db: Session, business_id: UUID, **template_data) -> ClassTemplate:
        instructor_id = template_data.get("default_instructor_id")
        if instructor_id and not StaffRepository.get_staff(db, business_id, instructor_id):
            raise StaffNotFound()

        template = ClassRepository.create_template(db, business_id, **template_data)
        logger.info(f"Created class template {template.id}: {template.name}")
        return template

    @staticmethod
    def update_template(db: Session, business_id: UUID, template_id: UUID, **updates) -> ClassTemplate:
        """Partial update; existing occurrences keep their own capacity and times"""
        template = ClassRepository.get_template(db, business_id, template_id)
        if not template:
            raise ClassTemplateNotFound()

        instructor_id = updates.get("default_instructor_id")
        if instructor_id and not StaffRepository.get_staff(db, business_id, instructor_id):
            raise StaffNotFound()

        template = ClassRepository.update_template(db, template, **updates)
        logger.info(f"Updated class template {template.id}")
        return template
