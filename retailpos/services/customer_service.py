from sqlalchemy.orm import Session
from sqlalchemy import or_
from typing import Optional, List, Tuple
import math

from retailpos.models.customer import Customer
from retailpos.schemas.customer import CustomerCreate, CustomerUpdate
from retailpos.services.exceptions import CustomerNotFoundError


class CustomerService:
    """Service class for the customer store."""

    def __init__(self, db: Session):
        self.db = db

    def create(self, customer_data: CustomerCreate) -> Customer:
        customer = Customer(**customer_data.model_dump())
        self.db.add(customer)
        self.db.commit()
        self.db.refresh(customer)
        return customer

    def get_by_id(self, customer_id: int) -> Optional[Customer]:
        return self.db.get(Customer, customer_id)

    def get_or_raise(self, customer_id: int) -> Customer:
        customer = self.db.get(Customer, customer_id)
        if customer is None:
            raise CustomerNotFoundError(f"Customer with ID {customer_id} not found")
        return customer

    def get_all(
        self,
        page: int = 1,
        page_size: int = 10,
        search: str = None,
    ) -> Tuple[List[Customer], int, int]:
        """
        Get paginated list of customers, optionally filtered by name, email or phone.

        Returns:
            Tuple of (customers list, total count, total pages)
        """
        query = self.db.query(Customer)

        if search:
            pattern = f"%{search}%"
            query = query.filter(
                or_(
                    Customer.name.ilike(pattern),
                    Customer.email.ilike(pattern),
                    Customer.phone.ilike(pattern),
                )
            )

        total = query.count()
        total_pages = math.ceil(total / page_size) if total > 0 else 1

        offset = (page - 1) * page_size
        customers = query.order_by(Customer.name, Customer.id).offset(offset).limit(page_size).all()

        return customers, total, total_pages

    def update(self, customer_id: int, customer_data: CustomerUpdate) -> Customer:
        customer = self.get_or_raise(customer_id)

        for field, value in customer_data.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(customer, field, value)

        self.db.commit()
        self.db.refresh(customer)
        return customer
