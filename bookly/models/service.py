# bookly/models/service.py
"""
Service Model - bookable service definitions
Each service belongs to one business and carries the scheduling rules
(duration, buffers, seat capacity) the booking engine enforces.
"""
from sqlalchemy import (
    Column, String, Integer, ForeignKey, Boolean, DateTime, Text, CheckConstraint, UniqueConstraint
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid
from bookly.core.constants import CapacityType
from bookly.models.base import Base


class Service(Base):
    """
    Stores a service's scheduling rules.
    SINGLE services hold one active appointment per overlapping interval,
    MULTI services hold up to max_clients_per_slot.
    """
    __tablename__ = "services"
    __table_args__ = (
        CheckConstraint("max_clients_per_slot >= 1", name="ck_services_max_clients_positive"),
        CheckConstraint(
            "buffer_before_minutes BETWEEN 0 AND 1440 AND buffer_after_minutes BETWEEN 0 AND 1440",
            name="ck_services_buffers_bounded",
        ),
        CheckConstraint(
            "capacity_type <> 'SINGLE' OR max_clients_per_slot = 1",
            name="ck_services_single_has_one_seat",
        ),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    business_id = Column(
        UUID(as_uuid=True),
        ForeignKey("businesses.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    # Core service details
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)

    # Timing, in minutes
    duration_minutes = Column(Integer, nullable=False, default=60)
    buffer_before_minutes = Column(Integer, nullable=False, default=0)
    buffer_after_minutes = Column(Integer, nullable=False, default=0)

    # Seat accounting
    capacity_type = Column(String(10), nullable=False, default=CapacityType.SINGLE.value)
    max_clients_per_slot = Column(Integer, nullable=False, default=1)

    # When no staff is assigned, book unassigned instead of rejecting
    allow_any_staff = Column(Boolean, nullable=False, default=False)

    # Status and ordering
    is_active = Column(Boolean, default=True, index=True)
    display_order = Column(Integer, default=0)  # For UI sorting

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now()
    )

    # Relationships
    staff_assignments = relationship(
        "ServiceStaff",
        back_populates="service",
        cascade="all, delete-orphan",
        order_by=lambda: [ServiceStaff.display_order, ServiceStaff.staff_id],
    )

    def __repr__(self):
        return f"<Service(id={self.id}, name={self.name}, business_id={self.business_id})>"

    @property
    def is_multi_capacity(self) -> bool:
        return self.capacity_type == CapacityType.MULTI.value

    def to_dict(self):
        """Convert to dictionary for API responses"""
        return {
            "id": str(self.id),
            "business_id": str(self.business_id),
            "name": self.name,
            "description": self.description,
            "duration_minutes": self.duration_minutes,
            "buffer_before_minutes": self.buffer_before_minutes,
            "buffer_after_minutes": self.buffer_after_minutes,
            "capacity_type": self.capacity_type,
            "max_clients_per_slot": self.max_clients_per_slot,
            "allow_any_staff": self.allow_any_staff,
            "is_active": self.is_active,
            "display_order": self.display_order,
            "staff": [assignment.to_dict() for assignment in self.staff_assignments],
        }


class ServiceStaff(Base):
    """Staff eligible to perform a service, in resolution order"""
    __tablename__ = "service_staff"
    __table_args__ = (
        UniqueConstraint("service_id", "staff_id", name="uq_service_staff_pair"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    business_id = Column(UUID(as_uuid=True), ForeignKey("businesses.id"), nullable=False, index=True)
    service_id = Column(
        UUID(as_uuid=True), ForeignKey("services.id", ondelete="CASCADE"), nullable=False, index=True
    )
    staff_id = Column(
        UUID(as_uuid=True), ForeignKey("staff_members.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Ties on display_order break on staff_id ascending
    display_order = Column(Integer, nullable=False, default=0)
    is_primary = Column(Boolean, nullable=False, default=False)

    service = relationship("Service", back_populates="staff_assignments")
    staff = relationship("StaffMember")

    def to_dict(self):
        return {
            "staff_id": str(self.staff_id),
            "display_order": self.display_order,
            "is_primary": self.is_primary,
        }

    def __repr__(self):
        return f"<ServiceStaff(service_id={self.service_id}, staff_id={self.staff_id}, order={self.display_order})>"
