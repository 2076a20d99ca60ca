# bookly/models/staff.py
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid
from bookly.models.base import Base


class StaffMember(Base):
    """A schedulable person. Inactive staff are never offered or assigned."""
    __tablename__ = "staff_members"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    business_id = Column(UUID(as_uuid=True), ForeignKey("businesses.id"), nullable=False, index=True)

    name = Column(String(200), nullable=False)
    email = Column(String, nullable=True)
    is_active = Column(Boolean, default=True, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    availability_blocks = relationship(
        "AvailabilityBlock",
        back_populates="staff",
        cascade="all, delete-orphan",
    )

    def to_dict(self):
        """Convert to dictionary for API responses"""
        return {
            "id": str(self.id),
            "business_id": str(self.business_id),
            "name": self.name,
            "email": self.email,
            "is_active": self.is_active,
        }

    def __repr__(self):
        return f"<StaffMember(id={self.id}, name={self.name}, active={self.is_active})>"
