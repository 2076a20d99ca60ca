"""Class repository - templates and occurrences"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session

from bookly.models import ClassTemplate, ClassOccurrence


class ClassRepository:
    """Repository for class template and occurrence database operations"""

    @staticmethod
    def get_template(db: Session, business_id: UUID, template_id: UUID) -> Optional[ClassTemplate]:
        """Get a class template by ID within the tenant"""
        return (
            db.query(ClassTemplate)
            .filter(ClassTemplate.id == template_id, ClassTemplate.business_id == business_id)
            .first()
        )

    @staticmethod
    def get_occurrence(
        db: Session, business_id: UUID, occurrence_id: UUID, lock: bool = False
    ) -> Optional[ClassOccurrence]:
        """Get a class occurrence by ID within the tenant"""
        query = db.query(ClassOccurrence).filter(
            ClassOccurrence.id == occurrence_id,
            ClassOccurrence.business_id == business_id,
        )
        if lock:
            query = query.with_for_update()
        return query.first()

    @staticmethod
    def create_occurrence(db: Session, business_id: UUID, **occurrence_data) -> ClassOccurrence:
        """Create a class occurrence"""
        occurrence = ClassOccurrence(business_id=business_id, **occurrence_data)
        db.add(occurrence)
        db.commit()
        db.refresh(occurrence)
        return occurrence

    @staticmethod
    def list_templates(db: Session, business_id: UUID, include_inactive: bool = False) -> list[ClassTemplate]:
        query = db.query(ClassTemplate).filter(ClassTemplate.business_id == business_id)
        if not include_inactive:
            query = query.filter(ClassTemplate.is_active.is_(True))
        return query.order_by(ClassTemplate.created_at.desc(), ClassTemplate.name.asc()).all()

    @staticmethod
    def create_template(db: Session, business_id: UUID, **template_data) -> ClassTemplate:
        template = ClassTemplate(business_id=business_id, **template_data)
        db.add(template)
        db.commit()
        db.refresh(template)
        return template

    @staticmethod
    def update_template(db: Session, template: ClassTemplate, **updates) -> ClassTemplate:
        for key, value in updates.items():
            if hasattr(template, key):
                setattr(template, key, value)
        db.commit()
        db.refresh(template)
        return template

    @staticmethod
    def list_occurrences(
        db: Session,
        business_id: UUID,
        range_start: datetime,
        range_end: Optional[datetime] = None,
        limit: int = 50,
    ) -> list[ClassOccurrence]:
        """Occurrences starting at or after range_start, earliest first"""
        query = db.query(ClassOccurrence).filter(
            ClassOccurrence.business_id == business_id,
            ClassOccurrence.start_time >= range_start,
        )
        if range_end:
            query = query.filter(ClassOccurrence.start_time < range_end)
        return query.order_by(ClassOccurrence.start_time.asc()).limit(limit).all()
