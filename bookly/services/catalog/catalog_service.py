# ===== bookly/services/catalog/catalog_service.py =====
"""
Management of the engine's inputs: services, their ordered eligible staff,
and the staff roster. Nothing here decides bookings; it only shapes what
StaffResolver and CapacityGuard read.
"""
from typing import List, Optional
from uuid import UUID
import logging

from sqlalchemy.orm import Session

from bookly.core.constants import CapacityType
from bookly.core.exceptions import InvalidServiceConfiguration, ServiceNotFound, StaffNotFound
from bookly.models.service import Service
from bookly.models.staff import StaffMember
from bookly.repositories.service_repository import ServiceRepository
from bookly.repositories.staff_repository import StaffRepository

logger = logging.getLogger(__name__)


class CatalogService:
    """Service and staff CRUD for one tenant"""

    # ------------------------------------------------------------------------
    # Services
    # ------------------------------------------------------------------------

    @staticmethod
    def list_services(db: Session, business_id: UUID, include_inactive: bool = False) -> List[Service]:
        return ServiceRepository.list_services(db, business_id, include_inactive=include_inactive)

    @staticmethod
    def get_service(db: Session, business_id: UUID, service_id: UUID) -> Service:
        service = ServiceRepository.get_service(db, business_id, service_id)
        if not service:
            raise ServiceNotFound()
        return service

    @staticmethod
    def create_service(
            db: Session,
            business_id: UUID,
            staff_ids: Optional[List[UUID]] = None,
            **service_data
    ) -> Service:
        """
        Create a service. staff_ids become its eligible staff in the order
        given; ids outside the tenant are dropped.
        """
        CatalogService._check_capacity(
            service_data.get("capacity_type", CapacityType.SINGLE.value),
            service_data.get("max_clients_per_slot", 1),
        )

        service = ServiceRepository.create_service(db, business_id, **service_data)
        if staff_ids:
            CatalogService._assign(db, business_id, service, staff_ids)

        db.commit()
        db.refresh(service)
        logger.info(f"Created service {service.id}: {service.name}")
        return service

    @staticmethod
    def update_service(
            db: Session,
            business_id: UUID,
            service_id: UUID,
            staff_ids: Optional[List[UUID]] = None,
            **updates
    ) -> Service:
        """Partial update; staff_ids, when not None, replaces the assignments"""
        service = CatalogService.get_service(db, business_id, service_id)

        CatalogService._check_capacity(
            updates.get("capacity_type", service.capacity_type),
            updates.get("max_clients_per_slot", service.max_clients_per_slot),
        )

        ServiceRepository.update_service(db, service, **updates)
        if staff_ids is not None:
            CatalogService._assign(db, business_id, service, staff_ids)

        db.commit()
        db.refresh(service)
        logger.info(f"Updated service {service.id}")
        return service

    @staticmethod
    def deactivate_service(db: Session, business_id: UUID, service_id: UUID) -> Service:
        """Soft delete: existing appointments keep their service row"""
        service = CatalogService.get_service(db, business_id, service_id)
        ServiceRepository.update_service(db, service, is_active=False)
        db.commit()
        db.refresh(service)
        logger.info(f"Deactivated service {service.id}")
        return service

    @staticmethod
    def _assign(db: Session, business_id: UUID, service: Service, staff_ids: List[UUID]) -> None:
        ordered = list(dict.fromkeys(staff_ids))
        known = StaffRepository.existing_staff_ids(db, business_id, ordered)

        dropped = [staff_id for staff_id in ordered if staff_id not in known]
        if dropped:
            logger.warning(f"Ignoring {len(dropped)} staff id(s) outside business {business_id}: {dropped}")

        ServiceRepository.replace_assignments(
            db, business_id, service, [staff_id for staff_id in ordered if staff_id in known]
        )

    @staticmethod
    def _check_capacity(capacity_type: str, max_clients_per_slot: int) -> None:
        if capacity_type == CapacityType.SINGLE.value and max_clients_per_slot != 1:
            raise InvalidServiceConfiguration()

    # ------------------------------------------------------------------------
    # Staff
    # ------------------------------------------------------------------------

    @staticmethod
    def list_staff(db: Session, business_id: UUID) -> List[StaffMember]:
        return StaffRepository.list_staff(db, business_id)

    @staticmethod
    def create_staff(db: Session, business_id: UUID, **staff_data) -> StaffMember:
        staff = StaffRepository.create_staff(db, business_id, **staff_data)
        logger.info(f"Created staff member {staff.id}: {staff.name}")
        return staff

    @staticmethod
    def update_staff(db: Session, business_id: UUID, staff_id: UUID, **updates) -> StaffMember:
        """
        Partial update. Setting is_active=False removes the staff member from
        every future resolution without touching existing appointments.
        """
        staff = StaffRepository.get_staff(db, business_id, staff_id)
        if not staff:
            raise StaffNotFound()

        staff = StaffRepository.update_staff(db, staff, **updates)
        logger.info(f"Updated staff member {staff.id} (active={staff.is_active})")
        return staff
