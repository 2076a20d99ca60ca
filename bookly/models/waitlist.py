# bookly/models/waitlist.py
from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid
from bookly.core.constants import WaitlistStatus
from bookly.models.base import Base


class WaitlistEntry(Base):
    """Queue slot for a full class. position is an append log, never reused."""
    __tablename__ = "waitlist_entries"
    __table_args__ = (
        UniqueConstraint("class_occurrence_id", "position", name="uq_waitlist_entries_occurrence_position"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    business_id = Column(UUID(as_uuid=True), ForeignKey("businesses.id"), nullable=False, index=True)
    class_occurrence_id = Column(
        UUID(as_uuid=True), ForeignKey("class_occurrences.id", ondelete="CASCADE"), nullable=False, index=True
    )
    customer_id = Column(UUID(as_uuid=True), ForeignKey("customers.id"), nullable=False)

    position = Column(Integer, nullable=False)
    status = Column(String(20), nullable=False, default=WaitlistStatus.PENDING.value)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    promoted_at = Column(DateTime(timezone=True), nullable=True)
    removed_at = Column(DateTime(timezone=True), nullable=True)

    customer = relationship("Customer")
    occurrence = relationship("ClassOccurrence")

    def to_dict(self):
        """Convert to dictionary for API responses"""
        return {
            "id": str(self.id),
            "business_id": str(self.business_id),
            "class_occurrence_id": str(self.class_occurrence_id),
            "customer_id": str(self.customer_id),
            "position": self.position,
            "status": self.status,
            "promoted_at": self.promoted_at.isoformat() if self.promoted_at else None,
        }

    def __repr__(self):
        return f"<WaitlistEntry(occurrence={self.class_occurrence_id}, position={self.position}, {self.status})>"
