"""Availability repository - weekly templates and date overrides"""

from datetime import date
from typing import Optional
from uuid import UUID

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from bookly.models import AvailabilityBlock


def day_of_week(on_date: date) -> int:
    """Weekday index used by availability blocks: 0=Sunday ... 6=Saturday"""
    return on_date.isoweekday() % 7


class AvailabilityRepository:
    """Repository for availability block database operations"""

    @staticmethod
    def get_blocks_for_day(
        db: Session, business_id: UUID, staff_id: UUID, on_date: date
    ) -> list[AvailabilityBlock]:
        """Overrides dated on_date plus weekly template rows for its weekday"""
        return (
            db.query(AvailabilityBlock)
            .filter(
                AvailabilityBlock.business_id == business_id,
                AvailabilityBlock.staff_id == staff_id,
                or_(
                    and_(AvailabilityBlock.is_override.is_(True), AvailabilityBlock.date == on_date),
                    and_(
                        AvailabilityBlock.is_override.is_(False),
                        AvailabilityBlock.day_of_week == day_of_week(on_date),
                    ),
                ),
            )
            .order_by(AvailabilityBlock.start_time.asc(), AvailabilityBlock.end_time.asc())
            .all()
        )

    @staticmethod
    def create_block(db: Session, business_id: UUID, staff_id: UUID, **block_data) -> AvailabilityBlock:
        """Create a template or override block"""
        block = AvailabilityBlock(business_id=business_id, staff_id=staff_id, **block_data)
        db.add(block)
        db.commit()
        db.refresh(block)
        return block

    @staticmethod
    def get_block(db: Session, business_id: UUID, block_id: UUID) -> Optional[AvailabilityBlock]:
        """Get a block by ID within the tenant"""
        return (
            db.query(AvailabilityBlock)
            .filter(AvailabilityBlock.id == block_id, AvailabilityBlock.business_id == business_id)
            .first()
        )

    @staticmethod
    def list_blocks(db: Session, business_id: UUID, staff_id: UUID) -> list[AvailabilityBlock]:
        """Every block of a staff member: overrides by date, then template rows by weekday"""
        return (
            db.query(AvailabilityBlock)
            .filter(AvailabilityBlock.business_id == business_id, AvailabilityBlock.staff_id == staff_id)
            .order_by(
                AvailabilityBlock.date.asc(),
                AvailabilityBlock.day_of_week.asc(),
                AvailabilityBlock.start_time.asc(),
            )
            .all()
        )

    @staticmethod
    def update_block(db: Session, block: AvailabilityBlock, **updates) -> AvailabilityBlock:
        for key, value in updates.items():
            if hasattr(block, key):
                setattr(block, key, value)
        db.commit()
        db.refresh(block)
        return block

    @staticmethod
    def delete_block(db: Session, block: AvailabilityBlock) -> None:
        db.delete(block)
        db.commit()
