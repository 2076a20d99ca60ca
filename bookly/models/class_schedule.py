# bookly/models/class_schedule.py
"""
Class models - a template defines the class, occurrences are the bookable sessions
"""
from sqlalchemy import Column, String, Integer, Text, Boolean, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid
from bookly.core.constants import OccurrenceStatus
from bookly.models.base import Base


class ClassTemplate(Base):
    __tablename__ = "class_templates"
    __table_args__ = (
        CheckConstraint("duration_minutes > 0", name="ck_class_templates_duration_positive"),
        CheckConstraint("default_capacity >= 1", name="ck_class_templates_capacity_positive"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    business_id = Column(UUID(as_uuid=True), ForeignKey("businesses.id"), nullable=False, index=True)

    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    class_type = Column(String(20), nullable=True)

    duration_minutes = Column(Integer, nullable=False)
    default_capacity = Column(Integer, nullable=False)
    default_instructor_id = Column(UUID(as_uuid=True), ForeignKey("staff_members.id"), nullable=True)

    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    occurrences = relationship("ClassOccurrence", back_populates="template")

    def to_dict(self):
        """Convert to dictionary for API responses"""
        return {
            "id": str(self.id),
            "business_id": str(self.business_id),
            "name": self.name,
            "description": self.description,
            "class_type": self.class_type,
            "duration_minutes": self.duration_minutes,
            "default_capacity": self.default_capacity,
            "default_instructor_id": str(self.default_instructor_id) if self.default_instructor_id else None,
            "is_active": self.is_active,
        }

    def __repr__(self):
        return f"<ClassTemplate(id={self.id}, name={self.name})>"


class ClassOccurrence(Base):
    __tablename__ = "class_occurrences"
    __table_args__ = (
        CheckConstraint("booked_count >= 0", name="ck_class_occurrences_booked_non_negative"),
        CheckConstraint("waitlist_count >= 0", name="ck_class_occurrences_waitlist_non_negative"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    business_id = Column(UUID(as_uuid=True), ForeignKey("businesses.id"), nullable=False, index=True)
    template_id = Column(UUID(as_uuid=True), ForeignKey("class_templates.id"), nullable=False, index=True)
    instructor_id = Column(UUID(as_uuid=True), ForeignKey("staff_members.id"), nullable=True)

    start_time = Column(DateTime(timezone=True), nullable=False)
    end_time = Column(DateTime(timezone=True), nullable=False)
    timezone = Column(String(50), nullable=True)

    capacity = Column(Integer, nullable=False)
    booked_count = Column(Integer, nullable=False, default=0)
    waitlist_count = Column(Integer, nullable=False, default=0)
    status = Column(String(20), nullable=False, default=OccurrenceStatus.SCHEDULED.value)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    template = relationship("ClassTemplate", back_populates="occurrences")

    @property
    def seats_left(self) -> int:
        return max(self.capacity - self.booked_count, 0)

    @property
    def is_full(self) -> bool:
        return self.booked_count >= self.capacity

    def to_dict(self):
        """Convert to dictionary for API responses"""
        return {
            "id": str(self.id),
            "business_id": str(self.business_id),
            "template_id": str(self.template_id),
            "instructor_id": str(self.instructor_id) if self.instructor_id else None,
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat(),
            "timezone": self.timezone,
            "capacity": self.capacity,
            "booked_count": self.booked_count,
            "waitlist_count": self.waitlist_count,
            "status": self.status,
        }

    def __repr__(self):
        return f"<ClassOccurrence(id={self.id}, {self.start_time}, {self.booked_count}/{self.capacity})>"
