"""Service repository - services and their eligible staff"""

from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session

from bookly.models import Service, ServiceStaff, StaffMember


class ServiceRepository:
    """Repository for service database operations"""

    @staticmethod
    def get_service(db: Session, business_id: UUID, service_id: UUID, lock: bool = False) -> Optional[Service]:
        """Get a service by ID within the tenant"""
        query = db.query(Service).filter(Service.id == service_id, Service.business_id == business_id)
        if lock:
            query = query.with_for_update()
        return query.first()

    @staticmethod
    def get_assigned_staff(
        db: Session,
        business_id: UUID,
        service_id: UUID,
        restrict_to_staff_id: Optional[UUID] = None,
    ) -> list[StaffMember]:
        """
        Active staff of the tenant assigned to the service, in resolution order:
        display_order ascending, then staff id ascending.
        """
        query = (
            db.query(StaffMember)
            .join(ServiceStaff, ServiceStaff.staff_id == StaffMember.id)
            .filter(
                ServiceStaff.service_id == service_id,
                StaffMember.business_id == business_id,
                StaffMember.is_active.is_(True),
            )
        )

        if restrict_to_staff_id:
            query = query.filter(StaffMember.id == restrict_to_staff_id)

        return query.order_by(ServiceStaff.display_order.asc(), ServiceStaff.staff_id.asc()).all()

    @staticmethod
    def assign_staff(
        db: Session,
        business_id: UUID,
        service: Service,
        staff: StaffMember,
        display_order: int = 0,
        is_primary: bool = False,
    ) -> ServiceStaff:
        """Make a staff member eligible for a service"""
        assignment = ServiceStaff(
            business_id=business_id,
            service_id=service.id,
            staff_id=staff.id,
            display_order=display_order,
            is_primary=is_primary,
        )
        db.add(assignment)
        db.commit()
        db.refresh(assignment)
        return assignment

    @staticmethod
    def list_services(db: Session, business_id: UUID, include_inactive: bool = False) -> list[Service]:
        query = db.query(Service).filter(Service.business_id == business_id)
        if not include_inactive:
            query = query.filter(Service.is_active.is_(True))
        return query.order_by(Service.display_order.asc(), Service.created_at.asc()).all()

    @staticmethod
    def create_service(db: Session, business_id: UUID, **service_data) -> Service:
        """Stage a new service; the caller owns the transaction"""
        service = Service(business_id=business_id, **service_data)
        db.add(service)
        db.flush()
        return service

    @staticmethod
    def update_service(db: Session, service: Service, **updates) -> Service:
        """Stage field updates on a service; the caller owns the transaction"""
        for key, value in updates.items():
            if hasattr(service, key):
                setattr(service, key, value)
        db.flush()
        return service

    @staticmethod
    def replace_assignments(
        db: Session,
        business_id: UUID,
        service: Service,
        staff_ids: list[UUID],
    ) -> list[ServiceStaff]:
        """
        Make staff_ids the service's eligible staff, in that order.
        Existing pairs are reordered in place; dropped pairs are deleted.
        The first staff member is the primary one.
        """
        existing = {assignment.staff_id: assignment for assignment in service.staff_assignments}

        assignments = []
        for index, staff_id in enumerate(staff_ids):
            assignment = existing.get(staff_id) or ServiceStaff(
                business_id=business_id, service_id=service.id, staff_id=staff_id
            )
            assignment.display_order = index
            assignment.is_primary = index == 0
            assignments.append(assignment)

        service.staff_assignments = assignments
        db.flush()
        return assignments
