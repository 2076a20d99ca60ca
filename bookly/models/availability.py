# bookly/models/availability.py
from sqlalchemy import Column, String, Integer, Boolean, Date, ForeignKey, CheckConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
import uuid
from bookly.models.base import Base


class AvailabilityBlock(Base):
    """
    One window a staff member works in.

    Weekly template rows carry day_of_week (0=Sunday, 6=Saturday) and no date.
    Override rows carry an exact date and no day_of_week; any override on a
    date replaces that weekday's template rows for that date.
    """
    __tablename__ = "availability_blocks"
    __table_args__ = (
        CheckConstraint(
            "(is_override AND date IS NOT NULL AND day_of_week IS NULL) OR "
            "(NOT is_override AND date IS NULL AND day_of_week IS NOT NULL)",
            name="ck_availability_blocks_override_xor_weekly",
        ),
        CheckConstraint("end_time > start_time", name="ck_availability_blocks_end_after_start"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    business_id = Column(UUID(as_uuid=True), ForeignKey("businesses.id"), nullable=False, index=True)
    staff_id = Column(
        UUID(as_uuid=True), ForeignKey("staff_members.id", ondelete="CASCADE"), nullable=False, index=True
    )

    is_override = Column(Boolean, nullable=False, default=False)
    day_of_week = Column(Integer, nullable=True)
    date = Column(Date, nullable=True, index=True)

    # "HH:MM", zero padded so string comparison matches time order
    start_time = Column(String(5), nullable=False)
    end_time = Column(String(5), nullable=False)

    # Overrides only: False = day off, the block contributes no window
    is_available = Column(Boolean, nullable=False, default=True)
    reason = Column(String, nullable=True)  # "Holiday", "Vacation", etc.

    staff = relationship("StaffMember", back_populates="availability_blocks")

    def to_dict(self):
        """Convert to dictionary for API responses"""
        return {
            "id": str(self.id),
            "staff_id": str(self.staff_id),
            "is_override": self.is_override,
            "day_of_week": self.day_of_week,
            "date": self.date.isoformat() if self.date else None,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "is_available": self.is_available,
            "reason": self.reason,
        }

    def __repr__(self):
        when = self.date.isoformat() if self.is_override and self.date else f"dow={self.day_of_week}"
        return f"<AvailabilityBlock(staff_id={self.staff_id}, {when}, {self.start_time}-{self.end_time})>"
