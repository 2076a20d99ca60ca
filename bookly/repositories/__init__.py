# bookly/repositories/__init__.py
"""
Tenant-scoped data access, one repository per entity.
Every query filters on business_id; nothing here makes scheduling decisions.
"""
from .appointment_repository import AppointmentRepository
from .availability_repository import AvailabilityRepository
from .class_repository import ClassRepository
from .customer_repository import CustomerRepository
from .service_repository import ServiceRepository
from .staff_repository import StaffRepository
from .waitlist_repository import WaitlistRepository

__all__ = [
    "AppointmentRepository",
    "AvailabilityRepository",
    "ClassRepository",
    "CustomerRepository",
    "ServiceRepository",
    "StaffRepository",
    "WaitlistRepository",
]
