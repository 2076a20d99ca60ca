# ============================================================================
# FILE: bookly/api/v1/dashboard/services.py
# Service management and ordered staff assignment - thin HTTP layer
# ============================================================================
from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session
from uuid import UUID

from bookly.config.database import get_db
from bookly.api.dependencies import get_business_id
from bookly.schemas.scheduling import ServiceCreate, ServiceUpdate
from bookly.services.catalog.catalog_service import CatalogService

router = APIRouter(prefix="/services", tags=["dashboard-services"])


def _service_fields(data: dict) -> dict:
    if data.get("capacity_type") is not None:
        data["capacity_type"] = data["capacity_type"].value
    return data


@router.get("")
def list_services(
        include_inactive: bool = Query(False),
        business_id: UUID = Depends(get_business_id),
        db: Session = Depends(get_db)
):
    """Services with their eligible staff, in display order"""
    services = CatalogService.list_services(db, business_id, include_inactive=include_inactive)
    return {"total": len(services), "services": [service.to_dict() for service in services]}


@router.post("", status_code=201)
def create_service(
        payload: ServiceCreate,
        business_id: UUID = Depends(get_business_id),
        db: Session = Depends(get_db)
):
    """
    Create a service. The order of staff_ids is the order StaffResolver
    tries them in.
    """
    data = _service_fields(payload.model_dump())
    service = CatalogService.create_service(db, business_id, **data)
    return {"service": service.to_dict()}


@router.get("/{service_id}")
def get_service(
        service_id: UUID = Path(..., description="The service ID"),
        business_id: UUID = Depends(get_business_id),
        db: Session = Depends(get_db)
):
    service = CatalogService.get_service(db, business_id, service_id)
    return {"service": service.to_dict()}


@router.put("/{service_id}")
def update_service(
        payload: ServiceUpdate,
        service_id: UUID = Path(..., description="The service ID"),
        business_id: UUID = Depends(get_business_id),
        db: Session = Depends(get_db)
):
    """Update fields; staff_ids, when sent, replaces and reorders the assignments"""
    data = _service_fields(payload.model_dump(exclude_none=True))
    service = CatalogService.update_service(db, business_id, service_id, **data)
    return {"service": service.to_dict()}


@router.delete("/{service_id}")
def delete_service(
        service_id: UUID = Path(..., description="The service ID"),
        business_id: UUID = Depends(get_business_id),
        db: Session = Depends(get_db)
):
    """Deactivate a service; its appointments are kept"""
    service = CatalogService.deactivate_service(db, business_id, service_id)
    return {"success": True, "message": "Service deactivated", "service_id": str(service.id)}
