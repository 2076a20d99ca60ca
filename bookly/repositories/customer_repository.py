"""Customer repository"""

from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session

from bookly.models import Customer


class CustomerRepository:
    """Repository for customer database operations"""

    @staticmethod
    def get_customer(db: Session, business_id: UUID, customer_id: UUID) -> Optional[Customer]:
        """Get a customer by ID within the tenant"""
        return (
            db.query(Customer)
            .filter(Customer.id == customer_id, Customer.business_id == business_id)
            .first()
        )
