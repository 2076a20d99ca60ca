# bookly/models/__init__.py
from .base import Base
from .business import Business
from .customer import Customer
from .staff import StaffMember
from .service import Service, ServiceStaff
from .availability import AvailabilityBlock
from .appointment import Appointment
from .class_schedule import ClassTemplate, ClassOccurrence
from .waitlist import WaitlistEntry

__all__ = [
    "Base",
    "Business",
    "Customer",
    "StaffMember",
    "Service",
    "ServiceStaff",
    "AvailabilityBlock",
    "Appointment",
    "ClassTemplate",
    "ClassOccurrence",
    "WaitlistEntry",
]
