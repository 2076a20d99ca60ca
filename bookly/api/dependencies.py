# ============================================================================
# FILE: bookly/api/dependencies.py
# Tenant context for the scheduling endpoints
# ============================================================================
from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session
from uuid import UUID

from bookly.config.database import get_db
from bookly.models.business import Business


def get_business_id(
        x_business_id: str = Header(..., alias="X-Business-ID", description="Tenant the request acts for"),
        db: Session = Depends(get_db)
) -> UUID:
    """
    Resolve the tenant from the X-Business-ID header.
    Authentication sits in front of this service; this only checks the tenant exists.
    """
    try:
        business_id = UUID(x_business_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing business context"
        )

    business = db.query(Business).filter(
        Business.id == business_id,
        Business.is_active.is_(True)
    ).first()

    if not business:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Business not found"
        )

    return business_id
