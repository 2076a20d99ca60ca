"""Staff repository - staff member lookups"""

from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session

from bookly.models import StaffMember


class StaffRepository:
    """Repository for staff database operations"""

    @staticmethod
    def get_staff(db: Session, business_id: UUID, staff_id: UUID, lock: bool = False) -> Optional[StaffMember]:
        """Get a staff member by ID within the tenant"""
        query = db.query(StaffMember).filter(
            StaffMember.id == staff_id,
            StaffMember.business_id == business_id,
        )
        if lock:
            query = query.with_for_update()
        return query.first()

    @staticmethod
    def list_staff(db: Session, business_id: UUID) -> list[StaffMember]:
        return (
            db.query(StaffMember)
            .filter(StaffMember.business_id == business_id)
            .order_by(StaffMember.name.asc(), StaffMember.id.asc())
            .all()
        )

    @staticmethod
    def existing_staff_ids(db: Session, business_id: UUID, staff_ids: list[UUID]) -> set[UUID]:
        """The subset of staff_ids that belong to the tenant"""
        if not staff_ids:
            return set()
        rows = (
            db.query(StaffMember.id)
            .filter(StaffMember.business_id == business_id, StaffMember.id.in_(staff_ids))
            .all()
        )
        return {row[0] for row in rows}

    @staticmethod
    def create_staff(db: Session, business_id: UUID, **staff_data) -> StaffMember:
        staff = StaffMember(business_id=business_id, **staff_data)
        db.add(staff)
        db.commit()
        db.refresh(staff)
        return staff

    @staticmethod
    def update_staff(db: Session, staff: StaffMember, **updates) -> StaffMember:
        for key, value in updates.items():
            if hasattr(staff, key):
                setattr(staff, key, value)
        db.commit()
        db.refresh(staff)
        return staff
